"""Contracts of the collaborators driven by the harness."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from frameprobe.api.frame_output import FullOutput
from frameprobe.api.geometry import Rect
from frameprobe.api.input_events import RawInput
from frameprobe.api.meshes import ClippedPrimitive
from frameprobe.api.simulated import SimulatedEvent


class AppContext(Protocol):
    """GUI framework context that owns layout, widgets and tessellation."""

    def enable_accessibility(self) -> None:
        """Turn on accessibility tree output for every following frame."""

    def run(self, raw_input: RawInput, app: "AppCallback") -> FullOutput:
        """Run one frame of `app` against `raw_input`."""

    def set_pixels_per_point(self, pixels_per_point: float) -> None:
        """Override the pixel density used for layout and tessellation."""

    def pixels_per_point(self) -> float:
        """Return the current pixel density."""

    def screen_rect(self) -> Rect:
        """Return the screen rectangle of the last frame, in points."""

    def tessellate(
        self, shapes: Sequence[object], pixels_per_point: float
    ) -> list[ClippedPrimitive]:
        """Convert draw shapes into triangle meshes."""


AppCallback = Callable[[AppContext], None]


class AccessibilityState(Protocol):
    """Accessibility query engine state merged from per-frame tree updates."""

    def update(self, update: object) -> None:
        """Merge one tree update; updates arrive in frame order."""

    def take_events(self) -> list[SimulatedEvent]:
        """Return and clear queued simulated events, oldest first."""

    def node(self) -> object:
        """Return the queryable root node."""


AccessibilityFactory = Callable[[object], AccessibilityState]


__all__ = ["AccessibilityFactory", "AccessibilityState", "AppCallback", "AppContext"]
