"""Abstract-to-native key and pointer button tables."""

from __future__ import annotations

from frameprobe.api.input_events import Key, PointerButton
from frameprobe.api.simulated import MouseButton, SimKey

_POINTER_BUTTONS: dict[MouseButton, PointerButton] = {
    MouseButton.LEFT: PointerButton.PRIMARY,
    MouseButton.RIGHT: PointerButton.SECONDARY,
    MouseButton.MIDDLE: PointerButton.MIDDLE,
    MouseButton.BACK: PointerButton.EXTRA1,
    MouseButton.FORWARD: PointerButton.EXTRA2,
}

_NATIVE_KEY_VALUES = frozenset(key.value for key in Key)

_KEYS: dict[SimKey, Key] = {
    sim_key: Key(sim_key.value) for sim_key in SimKey if sim_key.value in _NATIVE_KEY_VALUES
}

# Modifier keys and the `Modifiers` field each one drives.
MODIFIER_FLAGS: dict[SimKey, str] = {
    SimKey.ALT: "alt",
    SimKey.COMMAND: "command",
    SimKey.CONTROL: "ctrl",
    SimKey.SHIFT: "shift",
}


def pointer_button_to_native(button: MouseButton) -> PointerButton | None:
    """Return the native button, or None when the platform has no equivalent."""
    return _POINTER_BUTTONS.get(button)


def sim_key_to_native(key: SimKey) -> Key | None:
    """Return the native key code, or None when the key is unsupported."""
    return _KEYS.get(key)


def unmapped_keys() -> frozenset[SimKey]:
    return frozenset(key for key in SimKey if key not in _KEYS)


__all__ = [
    "MODIFIER_FLAGS",
    "pointer_button_to_native",
    "sim_key_to_native",
    "unmapped_keys",
]
