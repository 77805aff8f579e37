"""Frame driver: replays simulated input through the application one frame at a time."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from frameprobe.api.app_port import (
    AccessibilityFactory,
    AccessibilityState,
    AppCallback,
    AppContext,
)
from frameprobe.api.errors import AccessibilityUnavailableError
from frameprobe.api.frame_output import FullOutput
from frameprobe.api.geometry import Pos2, Rect, Vec2
from frameprobe.api.input_events import Modifiers, RawInput
from frameprobe.input.translator import InputTranslator
from frameprobe.rendering.texture_ledger import TextureDeltaLedger
from frameprobe.runtime.config import HarnessConfig, load_harness_config
from frameprobe.runtime.logging import setup_harness_logging

if TYPE_CHECKING:
    from frameprobe.rendering.readback import RgbaImage
    from frameprobe.rendering.snapshot_renderer import SnapshotRenderer
    from frameprobe.runtime.builder import HarnessBuilder

logger = logging.getLogger(__name__)


class Harness:
    """Drive one application callback frame by frame.

    The callback runs once at construction to build the initial UI. Each
    `run` call then advances exactly one frame: queued simulated actions are
    translated into the pending input batch, the callback runs against that
    batch, and the accessibility update and texture delta of the new frame are
    absorbed.
    """

    def __init__(
        self,
        context: AppContext,
        app: AppCallback,
        *,
        accessibility_factory: AccessibilityFactory,
        config: HarnessConfig | None = None,
    ) -> None:
        setup_harness_logging()
        cfg = config if config is not None else load_harness_config()
        self._context = context
        self._app = app
        self._translator = InputTranslator(debug=cfg.debug_input)
        self._ledger = TextureDeltaLedger()
        self._frame_index = 0

        context.enable_accessibility()
        self._input = RawInput(
            screen_rect=Rect.from_min_size(Pos2(), Vec2(float(cfg.width), float(cfg.height))),
            pixels_per_point=float(cfg.pixels_per_point),
        )
        context.set_pixels_per_point(float(cfg.pixels_per_point))

        output = context.run(self._input.take(), app)
        self._accessibility: AccessibilityState = accessibility_factory(
            _take_accessibility_update(output, frame_index=0)
        )
        self._ledger.append(output.take_textures_delta())
        self._output = output
        logger.debug(
            "harness_init size=(%s,%s) pixels_per_point=%s",
            cfg.width,
            cfg.height,
            cfg.pixels_per_point,
        )

    @staticmethod
    def builder(accessibility_factory: AccessibilityFactory) -> "HarnessBuilder":
        from frameprobe.runtime.builder import HarnessBuilder

        return HarnessBuilder(accessibility_factory=accessibility_factory)

    def run(self) -> None:
        """Run exactly one frame."""
        simulated = self._accessibility.take_events()
        for event in simulated:
            self._input.events.extend(self._translator.translate(event))
        frame_input = self._input.take()

        output = self._context.run(frame_input, self._app)
        update = _take_accessibility_update(output, frame_index=self._frame_index + 1)
        self._frame_index += 1
        self._accessibility.update(update)
        self._ledger.append(output.take_textures_delta())
        self._output = output
        logger.debug(
            "harness_frame frame=%d simulated=%d native=%d pending_texture_deltas=%d",
            self._frame_index,
            len(simulated),
            len(frame_input.events),
            len(self._ledger),
        )

    def run_steps(self, count: int) -> None:
        """Run `count` frames, e.g. to let animations or idle frames settle."""
        if count < 0:
            raise ValueError("count must be >= 0")
        for _ in range(count):
            self.run()

    def set_size(self, width: float, height: float) -> "Harness":
        """Set the screen size in points for the next frame."""
        self._input.screen_rect = Rect.from_min_size(Pos2(), Vec2(float(width), float(height)))
        return self

    def set_pixels_per_point(self, pixels_per_point: float) -> "Harness":
        """Set the pixel density for input reporting and rendering."""
        if pixels_per_point <= 0:
            raise ValueError("pixels_per_point must be > 0")
        self._input.pixels_per_point = float(pixels_per_point)
        self._context.set_pixels_per_point(float(pixels_per_point))
        return self

    def render(self, renderer: "SnapshotRenderer") -> "RgbaImage":
        """Render the latest frame with `renderer`."""
        return renderer.render(self)

    def node(self) -> object:
        """Return the accessibility root node for queries."""
        return self._accessibility.node()

    def screen_size(self) -> Vec2:
        return self._context.screen_rect().size

    def pixels_per_point(self) -> float:
        return float(self._context.pixels_per_point())

    @property
    def context(self) -> AppContext:
        return self._context

    @property
    def input(self) -> RawInput:
        """Pending input for the next frame; events may be injected directly."""
        return self._input

    @property
    def output(self) -> FullOutput:
        return self._output

    @property
    def accessibility_state(self) -> AccessibilityState:
        return self._accessibility

    @property
    def texture_ledger(self) -> TextureDeltaLedger:
        return self._ledger

    @property
    def modifiers(self) -> Modifiers:
        return self._translator.modifiers

    @property
    def last_pointer_pos(self) -> Pos2:
        return self._translator.last_pointer_pos

    @property
    def frame_index(self) -> int:
        return self._frame_index


def _take_accessibility_update(output: FullOutput, *, frame_index: int) -> object:
    update = output.platform_output.take_accessibility_update()
    if update is None:
        raise AccessibilityUnavailableError(
            f"frame {frame_index} produced no accessibility update; "
            "accessibility support is disabled on the application context"
        )
    return update


__all__ = ["Harness"]
