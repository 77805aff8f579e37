"""Simulated input translation modules."""

from frameprobe.input.keymap import pointer_button_to_native, sim_key_to_native
from frameprobe.input.translator import InputTranslator

__all__ = ["InputTranslator", "pointer_button_to_native", "sim_key_to_native"]
