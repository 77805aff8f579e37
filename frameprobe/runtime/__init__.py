"""Harness runtime modules."""

from frameprobe.runtime.builder import HarnessBuilder
from frameprobe.runtime.config import HarnessConfig, RendererConfig, load_harness_config
from frameprobe.runtime.harness import Harness
from frameprobe.runtime.logging import configure_harness_logging, setup_harness_logging

__all__ = [
    "Harness",
    "HarnessBuilder",
    "HarnessConfig",
    "RendererConfig",
    "configure_harness_logging",
    "load_harness_config",
    "setup_harness_logging",
]
