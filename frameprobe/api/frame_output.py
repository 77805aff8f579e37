"""Per-frame output contracts produced by the application context."""

from __future__ import annotations

from dataclasses import dataclass, field

from frameprobe.api.textures import TexturesDelta


@dataclass(slots=True)
class PlatformOutput:
    """Platform-facing side channel of one frame.

    `accessibility_update` is a diff against the previous frame's tree, except
    on the first frame where it describes the full tree.
    """

    accessibility_update: object | None = None

    def take_accessibility_update(self) -> object | None:
        update = self.accessibility_update
        self.accessibility_update = None
        return update


@dataclass(slots=True)
class FullOutput:
    """Result of one application callback invocation."""

    shapes: tuple[object, ...] = ()
    textures_delta: TexturesDelta = field(default_factory=TexturesDelta)
    platform_output: PlatformOutput = field(default_factory=PlatformOutput)
    pixels_per_point: float = 1.0

    def take_textures_delta(self) -> TexturesDelta:
        delta = self.textures_delta
        self.textures_delta = TexturesDelta()
        return delta


__all__ = ["FullOutput", "PlatformOutput"]
