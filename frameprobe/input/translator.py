"""Simulated action to native input event translation."""

from __future__ import annotations

import logging

from frameprobe.api.geometry import Pos2
from frameprobe.api.input_events import (
    AccessibilityActionEvent,
    InputEvent,
    KeyEvent,
    Modifiers,
    PointerButtonEvent,
    PointerMovedEvent,
    TextEvent,
)
from frameprobe.api.simulated import (
    ActionRequest,
    CursorMoved,
    ElementState,
    ImeCommit,
    KeyInput,
    MouseInput,
    SimulatedEvent,
)
from frameprobe.input.keymap import MODIFIER_FLAGS, pointer_button_to_native, sim_key_to_native

logger = logging.getLogger(__name__)


class InputTranslator:
    """Translate simulated actions while tracking modifiers and pointer position.

    State changes are applied before the event that depends on them is built,
    so later events of the same batch observe them.
    """

    def __init__(self, *, debug: bool = False) -> None:
        self._modifiers = Modifiers()
        self._last_pointer_pos = Pos2()
        self._debug = debug

    @property
    def modifiers(self) -> Modifiers:
        return self._modifiers

    @property
    def last_pointer_pos(self) -> Pos2:
        return self._last_pointer_pos

    def translate(self, event: SimulatedEvent) -> list[InputEvent]:
        """Return the native events for one simulated action, possibly none."""
        produced = self._translate(event)
        if self._debug:
            logger.debug("input_translate event=%r produced=%r", event, produced)
        return produced

    def translate_all(self, events: list[SimulatedEvent]) -> list[InputEvent]:
        produced: list[InputEvent] = []
        for event in events:
            produced.extend(self.translate(event))
        return produced

    def _translate(self, event: SimulatedEvent) -> list[InputEvent]:
        if isinstance(event, CursorMoved):
            pos = Pos2(float(event.x), float(event.y))
            self._last_pointer_pos = pos
            return [PointerMovedEvent(pos)]
        if isinstance(event, MouseInput):
            button = pointer_button_to_native(event.button)
            if button is None:
                logger.debug("input_drop_unmapped_button button=%s", event.button)
                return []
            return [
                PointerButtonEvent(
                    pos=self._last_pointer_pos,
                    button=button,
                    pressed=event.state is ElementState.PRESSED,
                    modifiers=self._modifiers,
                )
            ]
        if isinstance(event, KeyInput):
            pressed = event.state is ElementState.PRESSED
            flag = MODIFIER_FLAGS.get(event.key)
            if flag is not None:
                self._modifiers = self._modifiers.with_flag(flag, pressed)
            key = sim_key_to_native(event.key)
            if key is None:
                logger.debug("input_drop_unmapped_key key=%s", event.key)
                return []
            return [
                KeyEvent(
                    key=key,
                    pressed=pressed,
                    modifiers=self._modifiers,
                    repeat=False,
                    physical_key=None,
                )
            ]
        if isinstance(event, ImeCommit):
            return [TextEvent(event.text)]
        if isinstance(event, ActionRequest):
            return [AccessibilityActionEvent(event.request)]
        raise TypeError(f"unsupported simulated event: {event!r}")


__all__ = ["InputTranslator"]
