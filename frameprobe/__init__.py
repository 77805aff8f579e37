"""Headless frame-driving and snapshot-rendering test harness."""

from frameprobe.rendering import RgbaImage, SnapshotRenderer, TextureDeltaLedger
from frameprobe.runtime import Harness, HarnessBuilder, HarnessConfig

__all__ = [
    "Harness",
    "HarnessBuilder",
    "HarnessConfig",
    "RgbaImage",
    "SnapshotRenderer",
    "TextureDeltaLedger",
]
