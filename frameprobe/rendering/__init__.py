"""Snapshot rendering modules."""

from frameprobe.rendering.readback import RgbaImage
from frameprobe.rendering.snapshot_renderer import SnapshotRenderer
from frameprobe.rendering.texture_ledger import TextureDeltaLedger

__all__ = ["RgbaImage", "SnapshotRenderer", "TextureDeltaLedger"]
