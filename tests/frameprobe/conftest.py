from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from frameprobe.api.frame_output import FullOutput, PlatformOutput
from frameprobe.api.geometry import Rect
from frameprobe.api.input_events import RawInput
from frameprobe.api.meshes import VERTEX_DTYPE, ClippedPrimitive, Mesh
from frameprobe.api.simulated import SimulatedEvent
from frameprobe.api.textures import ColorImage, ImageDelta, TexturesDelta


@dataclass(frozen=True, slots=True)
class FakeNodeData:
    node_id: int
    role: str
    label: str


@dataclass(frozen=True, slots=True)
class FakeTreeUpdate:
    nodes: tuple[FakeNodeData, ...] = ()
    removed: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class FakeRectShape:
    x: float
    y: float
    w: float
    h: float
    color: tuple[int, int, int, int] = (255, 255, 255, 255)
    texture_id: int = 0


@dataclass(slots=True)
class FakeRoot:
    children: list[FakeNodeData] = field(default_factory=list)


class FakeAccessibilityState:
    """Merge fake tree diffs and hand out queued simulated events."""

    def __init__(self, update: FakeTreeUpdate) -> None:
        self.nodes: dict[int, FakeNodeData] = {}
        self.updates: list[FakeTreeUpdate] = []
        self._events: deque[SimulatedEvent] = deque()
        self.update(update)

    def update(self, update: object) -> None:
        assert isinstance(update, FakeTreeUpdate)
        self.updates.append(update)
        for node_id in update.removed:
            self.nodes.pop(node_id, None)
        for node in update.nodes:
            self.nodes[node.node_id] = node

    def queue(self, *events: SimulatedEvent) -> None:
        self._events.extend(events)

    def take_events(self) -> list[SimulatedEvent]:
        items = list(self._events)
        self._events.clear()
        return items

    def node(self) -> FakeRoot:
        return FakeRoot(children=[self.nodes[key] for key in sorted(self.nodes)])

    def query_by_label(self, label: str) -> list[FakeNodeData]:
        return [node for node in self.nodes.values() if node.label == label]


def white_texture_delta(texture_id: int = 0, size: int = 1) -> TexturesDelta:
    pixels = np.full((size, size, 4), 255, dtype=np.uint8)
    return TexturesDelta(set=((texture_id, ImageDelta(ColorImage(pixels))),))


class FakeContext:
    """Minimal immediate-mode context: widgets become tree nodes and rect shapes."""

    def __init__(
        self,
        *,
        emit_accessibility: bool = True,
        texture_deltas: Sequence[TexturesDelta] | None = None,
    ) -> None:
        self.emit_accessibility = emit_accessibility
        self.accessibility_enabled = False
        self.inputs: list[RawInput] = []
        self.tessellate_calls: list[tuple[tuple[object, ...], float]] = []
        self._ppp = 1.0
        self._screen_rect = Rect(0.0, 0.0, 0.0, 0.0)
        self._texture_deltas: deque[TexturesDelta] = deque(
            texture_deltas if texture_deltas is not None else (white_texture_delta(),)
        )
        self._known: dict[int, FakeNodeData] = {}
        self._frame_nodes: dict[int, FakeNodeData] = {}
        self._shapes: list[FakeRectShape] = []

    def enable_accessibility(self) -> None:
        self.accessibility_enabled = True

    def run(self, raw_input: RawInput, app) -> FullOutput:
        self.inputs.append(raw_input)
        if raw_input.screen_rect is not None:
            self._screen_rect = raw_input.screen_rect
        if raw_input.pixels_per_point is not None:
            self._ppp = float(raw_input.pixels_per_point)
        self._frame_nodes = {}
        self._shapes = []
        app(self)

        update: FakeTreeUpdate | None = None
        if self.emit_accessibility and self.accessibility_enabled:
            changed = tuple(
                node
                for node_id, node in self._frame_nodes.items()
                if self._known.get(node_id) != node
            )
            removed = tuple(node_id for node_id in self._known if node_id not in self._frame_nodes)
            update = FakeTreeUpdate(nodes=changed, removed=removed)
            self._known = dict(self._frame_nodes)
        delta = self._texture_deltas.popleft() if self._texture_deltas else TexturesDelta()
        return FullOutput(
            shapes=tuple(self._shapes),
            textures_delta=delta,
            platform_output=PlatformOutput(accessibility_update=update),
            pixels_per_point=self._ppp,
        )

    def label(self, text: str) -> None:
        node_id = len(self._frame_nodes) + 1
        self._frame_nodes[node_id] = FakeNodeData(node_id=node_id, role="label", label=text)

    def rect(self, x: float, y: float, w: float, h: float, **kwargs) -> None:
        self._shapes.append(FakeRectShape(x, y, w, h, **kwargs))

    def set_pixels_per_point(self, pixels_per_point: float) -> None:
        self._ppp = float(pixels_per_point)

    def pixels_per_point(self) -> float:
        return self._ppp

    def screen_rect(self) -> Rect:
        return self._screen_rect

    def tessellate(self, shapes, pixels_per_point: float) -> list[ClippedPrimitive]:
        self.tessellate_calls.append((tuple(shapes), float(pixels_per_point)))
        # Each rect is clipped to its own bounds.
        return [
            ClippedPrimitive(
                clip_rect=Rect(shape.x, shape.y, shape.x + shape.w, shape.y + shape.h),
                mesh=rect_mesh(shape),
            )
            for shape in shapes
        ]


def rect_mesh(shape: FakeRectShape) -> Mesh:
    vertices = np.zeros(4, dtype=VERTEX_DTYPE)
    vertices["pos"] = [
        (shape.x, shape.y),
        (shape.x + shape.w, shape.y),
        (shape.x + shape.w, shape.y + shape.h),
        (shape.x, shape.y + shape.h),
    ]
    vertices["uv"] = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
    vertices["color"] = [shape.color] * 4
    indices = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)
    return Mesh(indices=indices, vertices=vertices, texture_id=shape.texture_id)


def label_app(text: str = "Hello, world!"):
    def app(ctx: FakeContext) -> None:
        ctx.label(text)

    return app
