"""Native input event types consumed by the application context."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum

from frameprobe.api.geometry import Pos2, Rect


class PointerButton(StrEnum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MIDDLE = "middle"
    EXTRA1 = "extra1"
    EXTRA2 = "extra2"


class Key(StrEnum):
    """Native key codes understood by the application context."""

    # Modifiers
    ALT = "alt"
    COMMAND = "command"
    CONTROL = "control"
    SHIFT = "shift"

    # Navigation
    ARROW_DOWN = "arrow_down"
    ARROW_LEFT = "arrow_left"
    ARROW_RIGHT = "arrow_right"
    ARROW_UP = "arrow_up"
    ESCAPE = "escape"
    TAB = "tab"
    BACKSPACE = "backspace"
    ENTER = "enter"
    SPACE = "space"
    INSERT = "insert"
    DELETE = "delete"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"

    # Clipboard
    COPY = "copy"
    CUT = "cut"
    PASTE = "paste"

    # Punctuation
    COLON = "colon"
    COMMA = "comma"
    BACKSLASH = "backslash"
    SLASH = "slash"
    PIPE = "pipe"
    QUESTIONMARK = "questionmark"
    OPEN_BRACKET = "open_bracket"
    CLOSE_BRACKET = "close_bracket"
    BACKTICK = "backtick"
    MINUS = "minus"
    PERIOD = "period"
    PLUS = "plus"
    EQUALS = "equals"
    SEMICOLON = "semicolon"

    # Digits
    NUM0 = "num0"
    NUM1 = "num1"
    NUM2 = "num2"
    NUM3 = "num3"
    NUM4 = "num4"
    NUM5 = "num5"
    NUM6 = "num6"
    NUM7 = "num7"
    NUM8 = "num8"
    NUM9 = "num9"

    # Letters
    A = "a"
    B = "b"
    C = "c"
    D = "d"
    E = "e"
    F = "f"
    G = "g"
    H = "h"
    I = "i"  # noqa: E741
    J = "j"
    K = "k"
    L = "l"
    M = "m"
    N = "n"
    O = "o"  # noqa: E741
    P = "p"
    Q = "q"
    R = "r"
    S = "s"
    T = "t"
    U = "u"
    V = "v"
    W = "w"
    X = "x"
    Y = "y"
    Z = "z"

    # Function keys
    F1 = "f1"
    F2 = "f2"
    F3 = "f3"
    F4 = "f4"
    F5 = "f5"
    F6 = "f6"
    F7 = "f7"
    F8 = "f8"
    F9 = "f9"
    F10 = "f10"
    F11 = "f11"
    F12 = "f12"
    F13 = "f13"
    F14 = "f14"
    F15 = "f15"
    F16 = "f16"
    F17 = "f17"
    F18 = "f18"
    F19 = "f19"
    F20 = "f20"


@dataclass(frozen=True, slots=True)
class Modifiers:
    """Keyboard modifier state attached to key and pointer-button events."""

    alt: bool = False
    ctrl: bool = False
    shift: bool = False
    command: bool = False

    def with_flag(self, name: str, value: bool) -> "Modifiers":
        return replace(self, **{name: bool(value)})

    def any(self) -> bool:
        return self.alt or self.ctrl or self.shift or self.command


@dataclass(frozen=True, slots=True)
class PointerMovedEvent:
    pos: Pos2


@dataclass(frozen=True, slots=True)
class PointerButtonEvent:
    pos: Pos2
    button: PointerButton
    pressed: bool
    modifiers: Modifiers


@dataclass(frozen=True, slots=True)
class KeyEvent:
    key: Key
    pressed: bool
    modifiers: Modifiers
    repeat: bool = False
    physical_key: Key | None = None


@dataclass(frozen=True, slots=True)
class TextEvent:
    """Committed text, e.g. from an IME."""

    text: str


@dataclass(frozen=True, slots=True)
class AccessibilityActionEvent:
    """Accessibility action request forwarded to the application untouched."""

    request: object


InputEvent = (
    PointerMovedEvent
    | PointerButtonEvent
    | KeyEvent
    | TextEvent
    | AccessibilityActionEvent
)


@dataclass(slots=True)
class RawInput:
    """Pending input for the next frame.

    `events` is the ordered input batch. Screen rectangle and pixel density
    persist across frames; only the batch is consumed by `take`.
    """

    screen_rect: Rect | None = None
    pixels_per_point: float | None = None
    events: list[InputEvent] = field(default_factory=list)

    def take(self) -> "RawInput":
        """Return the input for one frame and reset the pending batch."""
        events = self.events
        self.events = []
        return RawInput(
            screen_rect=self.screen_rect,
            pixels_per_point=self.pixels_per_point,
            events=events,
        )


__all__ = [
    "AccessibilityActionEvent",
    "InputEvent",
    "Key",
    "KeyEvent",
    "Modifiers",
    "PointerButton",
    "PointerButtonEvent",
    "PointerMovedEvent",
    "RawInput",
    "TextEvent",
]
