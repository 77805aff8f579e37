"""Incremental texture updates produced by each frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

import numpy as np

TextureId: TypeAlias = int


class TextureFilter(StrEnum):
    NEAREST = "nearest"
    LINEAR = "linear"


@dataclass(frozen=True, slots=True)
class TextureOptions:
    magnification: TextureFilter = TextureFilter.LINEAR
    minification: TextureFilter = TextureFilter.LINEAR


@dataclass(frozen=True, slots=True, eq=False)
class ColorImage:
    """Premultiplied sRGBA pixels, shape (height, width, 4), dtype uint8."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError("ColorImage pixels must have shape (height, width, 4)")
        if self.pixels.dtype != np.uint8:
            raise ValueError("ColorImage pixels must be uint8")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def to_rgba(self, gamma: float = 1.0) -> np.ndarray:
        return np.ascontiguousarray(self.pixels)


@dataclass(frozen=True, slots=True, eq=False)
class FontImage:
    """Glyph coverage in [0, 1], shape (height, width)."""

    coverage: np.ndarray

    def __post_init__(self) -> None:
        if self.coverage.ndim != 2:
            raise ValueError("FontImage coverage must have shape (height, width)")

    @property
    def width(self) -> int:
        return int(self.coverage.shape[1])

    @property
    def height(self) -> int:
        return int(self.coverage.shape[0])

    def to_rgba(self, gamma: float = 1.0) -> np.ndarray:
        """Expand coverage to premultiplied white sRGBA.

        Coverage is raised to `gamma` and used as linear alpha; gamma below 1.0
        makes text appear bolder. The premultiplied white is linear too, so the
        RGB channels carry the sRGB encoding of alpha while A stays linear.
        """
        alpha = np.clip(self.coverage.astype(np.float32), 0.0, 1.0) ** float(gamma)
        rgb = _srgb_encode(alpha)
        pixels = np.empty((*alpha.shape, 4), dtype=np.uint8)
        pixels[:, :, :3] = np.rint(rgb * 255.0).astype(np.uint8)[:, :, None]
        pixels[:, :, 3] = np.rint(alpha * 255.0).astype(np.uint8)
        return pixels


def _srgb_encode(linear: np.ndarray) -> np.ndarray:
    return np.where(
        linear <= 0.0031308,
        linear * 12.92,
        1.055 * np.power(linear, 1.0 / 2.4) - 0.055,
    )


ImageData = ColorImage | FontImage


@dataclass(frozen=True, slots=True, eq=False)
class ImageDelta:
    """Whole-texture allocation (`pos is None`) or a patch at `pos`."""

    image: ImageData
    options: TextureOptions = field(default_factory=TextureOptions)
    pos: tuple[int, int] | None = None

    def is_whole(self) -> bool:
        return self.pos is None


@dataclass(frozen=True, slots=True, eq=False)
class TexturesDelta:
    """Textures allocated or patched this frame, then textures to free."""

    set: tuple[tuple[TextureId, ImageDelta], ...] = ()
    free: tuple[TextureId, ...] = ()

    def is_empty(self) -> bool:
        return not self.set and not self.free


__all__ = [
    "ColorImage",
    "FontImage",
    "ImageData",
    "ImageDelta",
    "TextureFilter",
    "TextureId",
    "TextureOptions",
    "TexturesDelta",
]
