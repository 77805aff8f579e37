"""GPU texture readback into host-side RGBA images."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from PIL import Image

# Buffer rows written by copy_texture_to_buffer must be aligned to this.
COPY_BYTES_PER_ROW_ALIGNMENT = 256


@dataclass(frozen=True, slots=True, eq=False)
class RgbaImage:
    """Packed 8-bit RGBA pixels, shape (height, width, 4)."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4 or self.pixels.dtype != np.uint8:
            raise ValueError("RgbaImage pixels must be uint8 with shape (height, width, 4)")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = (int(v) for v in self.pixels[y, x])
        return (r, g, b, a)

    def same_pixels(self, other: "RgbaImage") -> bool:
        return bool(np.array_equal(self.pixels, other.pixels))

    def to_bytes(self) -> bytes:
        return np.ascontiguousarray(self.pixels).tobytes()

    def to_pil(self) -> "Image.Image":
        from PIL import Image

        return Image.fromarray(np.ascontiguousarray(self.pixels))

    def save_png(self, path: str | Path) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        self.to_pil().save(target, format="PNG")
        return target


def padded_bytes_per_row(width: int) -> int:
    unpadded = int(width) * 4
    remainder = unpadded % COPY_BYTES_PER_ROW_ALIGNMENT
    if remainder == 0:
        return unpadded
    return unpadded + COPY_BYTES_PER_ROW_ALIGNMENT - remainder


def texture_to_image(
    wgpu_mod: Any,
    device: Any,
    texture: object,
    *,
    width: int,
    height: int,
) -> RgbaImage:
    """Copy an `rgba8unorm` texture into host memory; blocks until mapped."""
    wgpu = wgpu_mod
    padded = padded_bytes_per_row(width)
    buffer = device.create_buffer(
        label="frameprobe.readback",
        size=padded * int(height),
        usage=wgpu.BufferUsage.COPY_DST | wgpu.BufferUsage.MAP_READ,
    )
    encoder = device.create_command_encoder(label="frameprobe.readback")
    encoder.copy_texture_to_buffer(
        {"texture": texture, "mip_level": 0, "origin": (0, 0, 0)},
        {"buffer": buffer, "offset": 0, "bytes_per_row": padded, "rows_per_image": int(height)},
        (int(width), int(height), 1),
    )
    device.queue.submit([encoder.finish()])
    buffer.map_sync(wgpu.MapMode.READ)
    try:
        raw = buffer.read_mapped()
    finally:
        buffer.unmap()
    return RgbaImage(unpad_rows(raw, width=width, height=height, bytes_per_row=padded))


def unpad_rows(raw: object, *, width: int, height: int, bytes_per_row: int) -> np.ndarray:
    """Drop row padding from a mapped readback buffer."""
    data = np.frombuffer(raw, dtype=np.uint8)
    rows = data[: bytes_per_row * int(height)].reshape(int(height), bytes_per_row)
    return rows[:, : int(width) * 4].reshape(int(height), int(width), 4).copy()


__all__ = [
    "COPY_BYTES_PER_ROW_ALIGNMENT",
    "RgbaImage",
    "padded_bytes_per_row",
    "texture_to_image",
    "unpad_rows",
]
