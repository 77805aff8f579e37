"""Public harness API contracts."""

from frameprobe.api.app_port import (
    AccessibilityFactory,
    AccessibilityState,
    AppCallback,
    AppContext,
)
from frameprobe.api.errors import (
    AccessibilityUnavailableError,
    HarnessError,
    RendererInitError,
    TextureUpdateError,
)
from frameprobe.api.frame_output import FullOutput, PlatformOutput
from frameprobe.api.geometry import Pos2, Rect, Vec2
from frameprobe.api.input_events import (
    AccessibilityActionEvent,
    InputEvent,
    Key,
    KeyEvent,
    Modifiers,
    PointerButton,
    PointerButtonEvent,
    PointerMovedEvent,
    RawInput,
    TextEvent,
)
from frameprobe.api.logging import HarnessLoggingConfig
from frameprobe.api.meshes import VERTEX_DTYPE, ClippedPrimitive, Mesh
from frameprobe.api.simulated import (
    ActionRequest,
    CursorMoved,
    ElementState,
    ImeCommit,
    KeyInput,
    MouseButton,
    MouseInput,
    SimKey,
    SimulatedEvent,
)
from frameprobe.api.textures import (
    ColorImage,
    FontImage,
    ImageDelta,
    TextureFilter,
    TextureId,
    TextureOptions,
    TexturesDelta,
)

__all__ = [
    "VERTEX_DTYPE",
    "AccessibilityActionEvent",
    "AccessibilityFactory",
    "AccessibilityState",
    "AccessibilityUnavailableError",
    "ActionRequest",
    "AppCallback",
    "AppContext",
    "ClippedPrimitive",
    "ColorImage",
    "CursorMoved",
    "ElementState",
    "FontImage",
    "FullOutput",
    "HarnessError",
    "HarnessLoggingConfig",
    "ImageDelta",
    "ImeCommit",
    "InputEvent",
    "Key",
    "KeyEvent",
    "KeyInput",
    "Mesh",
    "Modifiers",
    "MouseButton",
    "MouseInput",
    "PlatformOutput",
    "PointerButton",
    "PointerButtonEvent",
    "PointerMovedEvent",
    "Pos2",
    "RawInput",
    "Rect",
    "RendererInitError",
    "SimKey",
    "SimulatedEvent",
    "TextEvent",
    "TextureFilter",
    "TextureId",
    "TextureOptions",
    "TextureUpdateError",
    "TexturesDelta",
    "Vec2",
]
