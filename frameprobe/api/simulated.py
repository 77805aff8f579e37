"""Simulated user actions queued by the accessibility query layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ElementState(StrEnum):
    PRESSED = "pressed"
    RELEASED = "released"


class MouseButton(StrEnum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"
    BACK = "back"
    FORWARD = "forward"
    OTHER = "other"


class SimKey(StrEnum):
    """Abstract key ids.

    Values matching a native `Key` value translate to that key; the remaining
    platform keys have no native counterpart.
    """

    ALT = "alt"
    COMMAND = "command"
    CONTROL = "control"
    SHIFT = "shift"

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

    COPY = "copy"
    CUT = "cut"
    PASTE = "paste"

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
    F21 = "f21"
    F22 = "f22"
    F23 = "f23"
    F24 = "f24"

    # Platform keys without a native key code.
    CAPS_LOCK = "caps_lock"
    NUM_LOCK = "num_lock"
    SCROLL_LOCK = "scroll_lock"
    PRINT_SCREEN = "print_screen"
    PAUSE = "pause"
    CONTEXT_MENU = "context_menu"


@dataclass(frozen=True, slots=True)
class CursorMoved:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class MouseInput:
    state: ElementState
    button: MouseButton


@dataclass(frozen=True, slots=True)
class KeyInput:
    state: ElementState
    key: SimKey


@dataclass(frozen=True, slots=True)
class ImeCommit:
    text: str


@dataclass(frozen=True, slots=True)
class ActionRequest:
    """Native accessibility action request, already in the target protocol."""

    request: object


SimulatedEvent = CursorMoved | MouseInput | KeyInput | ImeCommit | ActionRequest


__all__ = [
    "ActionRequest",
    "CursorMoved",
    "ElementState",
    "ImeCommit",
    "KeyInput",
    "MouseButton",
    "SimKey",
    "SimulatedEvent",
]
