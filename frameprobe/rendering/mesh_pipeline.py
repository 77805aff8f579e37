"""Textured triangle-mesh pipeline used by the snapshot renderer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from frameprobe.api.errors import TextureUpdateError
from frameprobe.api.geometry import Rect
from frameprobe.api.meshes import VERTEX_DTYPE, ClippedPrimitive
from frameprobe.api.textures import ImageDelta, TextureId, TextureOptions

logger = logging.getLogger(__name__)

TEXTURE_FORMAT = "rgba8unorm-srgb"
UNIFORM_BUFFER_SIZE = 16
MIN_BUFFER_CAPACITY = 4096


@dataclass(frozen=True, slots=True)
class ScreenDescriptor:
    """Render target size in physical pixels and the points-to-pixels scale."""

    size_in_pixels: tuple[int, int]
    pixels_per_point: float

    def screen_size_in_points(self) -> tuple[float, float]:
        ppp = float(self.pixels_per_point)
        return (self.size_in_pixels[0] / ppp, self.size_in_pixels[1] / ppp)


@dataclass(frozen=True, slots=True)
class _GpuTexture:
    texture: Any
    bind_group: Any
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class _DrawCall:
    clip_rect: Rect
    texture_id: TextureId
    first_index: int
    index_count: int
    base_vertex: int


class MeshPipeline:
    """Own the shader pipeline, GPU textures and mesh buffers of one device."""

    def __init__(
        self,
        wgpu_mod: Any,
        device: Any,
        *,
        output_format: str = "rgba8unorm",
        font_gamma: float = 1.0,
    ) -> None:
        self._wgpu = wgpu_mod
        self._device = device
        self._queue = device.queue
        self._output_format = str(output_format)
        self._font_gamma = float(font_gamma)
        self._textures: dict[TextureId, _GpuTexture] = {}
        self._samplers: dict[TextureOptions, Any] = {}
        self._vertex_buffer: Any | None = None
        self._vertex_capacity = 0
        self._index_buffer: Any | None = None
        self._index_capacity = 0
        self._draws: tuple[_DrawCall, ...] = ()
        self._staged_vertices = 0
        self._staged_indices = 0
        self._setup_pipeline()

    @property
    def texture_ids(self) -> frozenset[TextureId]:
        return frozenset(self._textures)

    def update_texture(self, texture_id: TextureId, delta: ImageDelta) -> None:
        """Allocate or patch the GPU texture for `texture_id`."""
        pixels = delta.image.to_rgba(self._font_gamma)
        height, width = int(pixels.shape[0]), int(pixels.shape[1])
        if width <= 0 or height <= 0:
            raise TextureUpdateError(f"texture {texture_id} update has an empty image")
        if delta.is_whole():
            gpu_texture = self._allocate_texture(texture_id, width, height, delta.options)
            origin = (0, 0, 0)
        else:
            existing = self._textures.get(texture_id)
            if existing is None:
                raise TextureUpdateError(
                    f"texture {texture_id} patched before it was allocated"
                )
            x, y = int(delta.pos[0]), int(delta.pos[1])
            if x < 0 or y < 0 or x + width > existing.width or y + height > existing.height:
                raise TextureUpdateError(
                    f"texture {texture_id} patch at ({x},{y}) size ({width},{height}) "
                    f"exceeds texture size ({existing.width},{existing.height})"
                )
            gpu_texture = existing
            origin = (x, y, 0)
        self._queue.write_texture(
            {"texture": gpu_texture.texture, "mip_level": 0, "origin": origin},
            np.ascontiguousarray(pixels).tobytes(),
            {"offset": 0, "bytes_per_row": 4 * width, "rows_per_image": height},
            (width, height, 1),
        )

    def free_texture(self, texture_id: TextureId) -> None:
        gpu_texture = self._textures.pop(texture_id, None)
        if gpu_texture is None:
            return
        destroy = getattr(gpu_texture.texture, "destroy", None)
        if callable(destroy):
            destroy()

    def update_buffers(
        self,
        primitives: list[ClippedPrimitive],
        screen: ScreenDescriptor,
    ) -> list[Any]:
        """Stage uniform, vertex and index uploads.

        Returns the command buffers carrying the staged copies; they must be
        submitted before the render pass that draws with these buffers.
        """
        encoder = self._device.create_command_encoder(label="frameprobe.upload")
        width_pts, height_pts = screen.screen_size_in_points()
        uniforms = np.array([width_pts, height_pts, 0.0, 0.0], dtype=np.float32)
        self._stage_copy(encoder, uniforms.tobytes(), self._uniform_buffer)

        draws: list[_DrawCall] = []
        vertex_chunks: list[np.ndarray] = []
        index_chunks: list[np.ndarray] = []
        vertex_count = 0
        index_count = 0
        for primitive in primitives:
            mesh = primitive.mesh
            if mesh.is_empty():
                continue
            draws.append(
                _DrawCall(
                    clip_rect=primitive.clip_rect,
                    texture_id=mesh.texture_id,
                    first_index=index_count,
                    index_count=int(len(mesh.indices)),
                    base_vertex=vertex_count,
                )
            )
            vertex_chunks.append(mesh.vertices)
            index_chunks.append(mesh.indices)
            vertex_count += int(len(mesh.vertices))
            index_count += int(len(mesh.indices))
        self._draws = tuple(draws)
        self._staged_vertices = vertex_count
        self._staged_indices = index_count

        if draws:
            vertex_bytes = np.concatenate(vertex_chunks).astype(VERTEX_DTYPE, copy=False).tobytes()
            index_bytes = np.concatenate(index_chunks).astype(np.uint32, copy=False).tobytes()
            self._vertex_buffer, self._vertex_capacity = self._ensure_capacity(
                self._vertex_buffer,
                self._vertex_capacity,
                len(vertex_bytes),
                usage=self._wgpu.BufferUsage.VERTEX | self._wgpu.BufferUsage.COPY_DST,
                label="frameprobe.vertices",
            )
            self._index_buffer, self._index_capacity = self._ensure_capacity(
                self._index_buffer,
                self._index_capacity,
                len(index_bytes),
                usage=self._wgpu.BufferUsage.INDEX | self._wgpu.BufferUsage.COPY_DST,
                label="frameprobe.indices",
            )
            self._stage_copy(encoder, vertex_bytes, self._vertex_buffer)
            self._stage_copy(encoder, index_bytes, self._index_buffer)
        return [encoder.finish()]

    def render(self, render_pass: Any, screen: ScreenDescriptor) -> int:
        """Record the draws staged by the last `update_buffers`; returns draws issued."""
        width_px, height_px = screen.size_in_pixels
        render_pass.set_viewport(0, 0, float(width_px), float(height_px), 0.0, 1.0)
        render_pass.set_pipeline(self._pipeline)
        render_pass.set_bind_group(0, self._uniform_bind_group)
        if not self._draws:
            return 0
        render_pass.set_vertex_buffer(0, self._vertex_buffer)
        render_pass.set_index_buffer(self._index_buffer, "uint32")
        issued = 0
        for draw in self._draws:
            scissor = scissor_rect(
                draw.clip_rect,
                pixels_per_point=screen.pixels_per_point,
                target_width=width_px,
                target_height=height_px,
            )
            if scissor is None:
                continue
            gpu_texture = self._textures.get(draw.texture_id)
            if gpu_texture is None:
                logger.warning("mesh_texture_missing texture_id=%s", draw.texture_id)
                continue
            render_pass.set_scissor_rect(*scissor)
            render_pass.set_bind_group(1, gpu_texture.bind_group)
            render_pass.draw_indexed(draw.index_count, 1, draw.first_index, draw.base_vertex, 0)
            issued += 1
        return issued

    def staged_counts(self) -> tuple[int, int, int]:
        """Return (draws, vertices, indices) staged by the last `update_buffers`."""
        return (len(self._draws), self._staged_vertices, self._staged_indices)

    def close(self) -> None:
        for texture_id in tuple(self._textures):
            self.free_texture(texture_id)
        self._samplers.clear()
        self._draws = ()
        self._vertex_buffer = None
        self._vertex_capacity = 0
        self._index_buffer = None
        self._index_capacity = 0

    def _setup_pipeline(self) -> None:
        wgpu = self._wgpu
        device = self._device
        shader = device.create_shader_module(label="frameprobe.mesh", code=_MESH_WGSL)
        self._uniform_buffer = device.create_buffer(
            label="frameprobe.uniforms",
            size=UNIFORM_BUFFER_SIZE,
            usage=wgpu.BufferUsage.UNIFORM | wgpu.BufferUsage.COPY_DST,
        )
        self._uniform_layout = device.create_bind_group_layout(
            label="frameprobe.uniform_layout",
            entries=[
                {
                    "binding": 0,
                    "visibility": wgpu.ShaderStage.VERTEX,
                    "buffer": {"type": "uniform", "min_binding_size": UNIFORM_BUFFER_SIZE},
                }
            ],
        )
        self._uniform_bind_group = device.create_bind_group(
            label="frameprobe.uniform_bind_group",
            layout=self._uniform_layout,
            entries=[
                {
                    "binding": 0,
                    "resource": {
                        "buffer": self._uniform_buffer,
                        "offset": 0,
                        "size": UNIFORM_BUFFER_SIZE,
                    },
                }
            ],
        )
        self._texture_layout = device.create_bind_group_layout(
            label="frameprobe.texture_layout",
            entries=[
                {
                    "binding": 0,
                    "visibility": wgpu.ShaderStage.FRAGMENT,
                    "texture": {
                        "sample_type": "float",
                        "view_dimension": "2d",
                        "multisampled": False,
                    },
                },
                {
                    "binding": 1,
                    "visibility": wgpu.ShaderStage.FRAGMENT,
                    "sampler": {"type": "filtering"},
                },
            ],
        )
        layout = device.create_pipeline_layout(
            label="frameprobe.pipeline_layout",
            bind_group_layouts=[self._uniform_layout, self._texture_layout],
        )
        self._pipeline = device.create_render_pipeline(
            label="frameprobe.mesh_pipeline",
            layout=layout,
            vertex={
                "module": shader,
                "entry_point": "vs_main",
                "buffers": [
                    {
                        "array_stride": VERTEX_DTYPE.itemsize,
                        "step_mode": "vertex",
                        "attributes": [
                            {"shader_location": 0, "offset": 0, "format": "float32x2"},
                            {"shader_location": 1, "offset": 8, "format": "float32x2"},
                            {"shader_location": 2, "offset": 16, "format": "unorm8x4"},
                        ],
                    }
                ],
            },
            primitive={"topology": "triangle-list", "front_face": "ccw", "cull_mode": "none"},
            depth_stencil=None,
            multisample={"count": 1, "mask": 0xFFFFFFFF, "alpha_to_coverage_enabled": False},
            fragment={
                "module": shader,
                "entry_point": "fs_main",
                "targets": [
                    {
                        "format": self._output_format,
                        "blend": {
                            "color": {
                                "src_factor": "one",
                                "dst_factor": "one-minus-src-alpha",
                                "operation": "add",
                            },
                            "alpha": {
                                "src_factor": "one-minus-dst-alpha",
                                "dst_factor": "one",
                                "operation": "add",
                            },
                        },
                        "write_mask": 0xF,
                    }
                ],
            },
        )

    def _allocate_texture(
        self,
        texture_id: TextureId,
        width: int,
        height: int,
        options: TextureOptions,
    ) -> _GpuTexture:
        wgpu = self._wgpu
        texture = self._device.create_texture(
            label=f"frameprobe.texture.{texture_id}",
            size=(width, height, 1),
            mip_level_count=1,
            sample_count=1,
            dimension="2d",
            format=TEXTURE_FORMAT,
            usage=wgpu.TextureUsage.TEXTURE_BINDING | wgpu.TextureUsage.COPY_DST,
        )
        bind_group = self._device.create_bind_group(
            label=f"frameprobe.texture_bind_group.{texture_id}",
            layout=self._texture_layout,
            entries=[
                {"binding": 0, "resource": texture.create_view()},
                {"binding": 1, "resource": self._sampler_for(options)},
            ],
        )
        self.free_texture(texture_id)
        gpu_texture = _GpuTexture(texture=texture, bind_group=bind_group, width=width, height=height)
        self._textures[texture_id] = gpu_texture
        return gpu_texture

    def _sampler_for(self, options: TextureOptions) -> Any:
        sampler = self._samplers.get(options)
        if sampler is None:
            sampler = self._device.create_sampler(
                label=f"frameprobe.sampler.{options.magnification}.{options.minification}",
                mag_filter=str(options.magnification),
                min_filter=str(options.minification),
                mipmap_filter="nearest",
                address_mode_u="clamp-to-edge",
                address_mode_v="clamp-to-edge",
            )
            self._samplers[options] = sampler
        return sampler

    def _ensure_capacity(
        self,
        buffer: Any | None,
        capacity: int,
        minimum_bytes: int,
        *,
        usage: int,
        label: str,
    ) -> tuple[Any, int]:
        if buffer is not None and capacity >= minimum_bytes:
            return buffer, capacity
        new_capacity = max(MIN_BUFFER_CAPACITY, capacity)
        while new_capacity < minimum_bytes:
            new_capacity *= 2
        created = self._device.create_buffer(label=label, size=new_capacity, usage=usage)
        return created, new_capacity

    def _stage_copy(self, encoder: Any, payload: bytes, target: Any) -> None:
        staging = self._device.create_buffer_with_data(
            label="frameprobe.staging",
            data=payload,
            usage=self._wgpu.BufferUsage.COPY_SRC,
        )
        encoder.copy_buffer_to_buffer(staging, 0, target, 0, len(payload))


def scissor_rect(
    clip_rect: Rect,
    *,
    pixels_per_point: float,
    target_width: int,
    target_height: int,
) -> tuple[int, int, int, int] | None:
    """Convert a clip rectangle in points to a pixel scissor clamped to the target.

    Returns None when nothing of the clip rectangle is visible.
    """
    pixels = clip_rect.scaled(float(pixels_per_point))
    min_x = _clamp(round(pixels.min_x), 0, target_width)
    min_y = _clamp(round(pixels.min_y), 0, target_height)
    max_x = _clamp(round(pixels.max_x), min_x, target_width)
    max_y = _clamp(round(pixels.max_y), min_y, target_height)
    width = max_x - min_x
    height = max_y - min_y
    if width <= 0 or height <= 0:
        return None
    return (min_x, min_y, width, height)


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(int(lower), min(int(upper), int(value)))


_MESH_WGSL = """
struct Locals {
    screen_size: vec2<f32>,
    _padding: vec2<f32>,
};

struct VsOut {
    @builtin(position) position: vec4<f32>,
    @location(0) uv: vec2<f32>,
    @location(1) color: vec4<f32>,
};

@group(0) @binding(0) var<uniform> locals: Locals;
@group(1) @binding(0) var tex_color: texture_2d<f32>;
@group(1) @binding(1) var tex_sampler: sampler;

@vertex
fn vs_main(
    @location(0) pos: vec2<f32>,
    @location(1) uv: vec2<f32>,
    @location(2) color: vec4<f32>,
) -> VsOut {
    var out: VsOut;
    out.position = vec4<f32>(
        2.0 * pos.x / locals.screen_size.x - 1.0,
        1.0 - 2.0 * pos.y / locals.screen_size.y,
        0.0,
        1.0,
    );
    out.uv = uv;
    out.color = color;
    return out;
}

fn gamma_from_linear_rgb(rgb: vec3<f32>) -> vec3<f32> {
    let cutoff = rgb < vec3<f32>(0.0031308);
    let lower = rgb * vec3<f32>(12.92);
    let higher = vec3<f32>(1.055) * pow(rgb, vec3<f32>(1.0 / 2.4)) - vec3<f32>(0.055);
    return select(higher, lower, cutoff);
}

@fragment
fn fs_main(input: VsOut) -> @location(0) vec4<f32> {
    let tex_linear = textureSample(tex_color, tex_sampler, input.uv);
    let tex_gamma = vec4<f32>(gamma_from_linear_rgb(tex_linear.rgb), tex_linear.a);
    return input.color * tex_gamma;
}
"""


__all__ = ["TEXTURE_FORMAT", "MeshPipeline", "ScreenDescriptor", "scissor_rect"]
