"""Tessellated triangle meshes handed to the GPU pipeline."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from frameprobe.api.geometry import Rect
from frameprobe.api.textures import TextureId

# Positions and uvs in logical points, color as premultiplied sRGBA.
VERTEX_DTYPE = np.dtype(
    [
        ("pos", np.float32, (2,)),
        ("uv", np.float32, (2,)),
        ("color", np.uint8, (4,)),
    ]
)


@dataclass(frozen=True, slots=True, eq=False)
class Mesh:
    indices: np.ndarray
    vertices: np.ndarray
    texture_id: TextureId = 0

    def __post_init__(self) -> None:
        if self.vertices.dtype != VERTEX_DTYPE:
            raise ValueError("Mesh vertices must use VERTEX_DTYPE")
        if self.indices.dtype != np.uint32:
            raise ValueError("Mesh indices must be uint32")
        if len(self.indices) % 3 != 0:
            raise ValueError("Mesh indices must describe whole triangles")

    def is_empty(self) -> bool:
        return len(self.indices) == 0 or len(self.vertices) == 0


@dataclass(frozen=True, slots=True, eq=False)
class ClippedPrimitive:
    clip_rect: Rect
    mesh: Mesh


def empty_vertices(count: int = 0) -> np.ndarray:
    return np.zeros(count, dtype=VERTEX_DTYPE)


__all__ = ["VERTEX_DTYPE", "ClippedPrimitive", "Mesh", "empty_vertices"]
