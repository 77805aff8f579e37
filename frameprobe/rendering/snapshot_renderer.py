"""Offscreen wgpu renderer turning the latest harness frame into pixels."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from frameprobe.api.errors import RendererInitError
from frameprobe.rendering.mesh_pipeline import MeshPipeline, ScreenDescriptor
from frameprobe.rendering.readback import RgbaImage, texture_to_image
from frameprobe.runtime.config import RendererConfig, load_renderer_config

if TYPE_CHECKING:
    from frameprobe.api.textures import TextureId
    from frameprobe.runtime.harness import Harness

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "rgba8unorm"
CLEAR_COLOR = (0.0, 0.0, 0.0, 1.0)


class SnapshotRenderer:
    """Own one GPU device and rasterize harness frames into `RgbaImage`s.

    `render` replays every pending texture delta, tessellates the latest
    shapes, draws them into an offscreen target cleared to opaque black and
    blocks until the pixels are back on the host. Frees carried by the newest
    delta are held until the next render that has new deltas to replay, so
    rendering twice without running a frame yields the same pixels.
    """

    def __init__(self, *, config: RendererConfig | None = None) -> None:
        cfg = config if config is not None else load_renderer_config()
        try:
            import wgpu
        except ImportError as exc:
            raise RendererInitError(
                "wgpu dependency unavailable",
                details={
                    "adapter_info": {},
                    "exception_type": exc.__class__.__name__,
                    "exception_message": str(exc),
                },
            ) from exc
        self._wgpu = wgpu
        adapters = list(wgpu.gpu.enumerate_adapters_sync())
        if not adapters:
            raise RendererInitError(
                "no adapter found",
                details={"adapter_info": {}, "requested_backends": tuple(cfg.wgpu_backends)},
            )
        adapter = _select_adapter(adapters, cfg.wgpu_backends)
        self._adapter_info = _extract_adapter_info(adapter)
        try:
            device = adapter.request_device_sync(label="frameprobe.device")
        except Exception as exc:
            raise RendererInitError(
                "failed to create device",
                details={
                    "adapter_info": dict(self._adapter_info),
                    "exception_type": exc.__class__.__name__,
                    "exception_message": str(exc),
                },
            ) from exc
        if device is None:
            raise RendererInitError(
                "failed to create device",
                details={"adapter_info": dict(self._adapter_info)},
            )
        self._device = device
        self._queue = device.queue
        self._pipeline = MeshPipeline(wgpu, device, output_format=OUTPUT_FORMAT)
        self._target: Any | None = None
        self._target_view: Any | None = None
        self._target_size = (0, 0)
        self._telemetry: dict[str, object] = {}
        self._pending_frees: tuple[TextureId, ...] = ()
        logger.debug("snapshot_renderer_init adapter=%s", self._adapter_info.get("description", ""))

    @property
    def adapter_info(self) -> dict[str, object]:
        return dict(self._adapter_info)

    def render(self, harness: "Harness") -> RgbaImage:
        """Render the harness' latest frame; consumes its texture delta ledger."""
        ledger = harness.texture_ledger
        entries = ledger.entries()
        texture_updates = 0
        texture_frees = 0
        if entries:
            pending, self._pending_frees = self._pending_frees, ()
            for texture_id in pending:
                self._pipeline.free_texture(texture_id)
                texture_frees += 1
        for position, delta in enumerate(entries):
            for texture_id, image_delta in delta.set:
                self._pipeline.update_texture(texture_id, image_delta)
                texture_updates += 1
            if position == len(entries) - 1:
                # The newest frame still draws with the textures it frees.
                self._pending_frees = delta.free
                continue
            for texture_id in delta.free:
                self._pipeline.free_texture(texture_id)
                texture_frees += 1

        pixels_per_point = harness.pixels_per_point()
        size = harness.screen_size()
        width = int(size.x * pixels_per_point)
        height = int(size.y * pixels_per_point)
        if width <= 0 or height <= 0:
            raise ValueError(f"render target must be at least 1x1 pixels, got {width}x{height}")
        screen = ScreenDescriptor(size_in_pixels=(width, height), pixels_per_point=pixels_per_point)

        primitives = harness.context.tessellate(harness.output.shapes, pixels_per_point)
        staged = self._pipeline.update_buffers(primitives, screen)

        target_view = self._ensure_target(width, height)
        encoder = self._device.create_command_encoder(label="frameprobe.render")
        render_pass = encoder.begin_render_pass(
            label="frameprobe.render_pass",
            color_attachments=[
                {
                    "view": target_view,
                    "resolve_target": None,
                    "clear_value": CLEAR_COLOR,
                    "load_op": "clear",
                    "store_op": "store",
                }
            ],
        )
        try:
            draws_issued = self._pipeline.render(render_pass, screen)
        finally:
            render_pass.end()

        self._queue.submit([*staged, encoder.finish()])
        self._queue.on_submitted_work_done_sync()

        image = texture_to_image(self._wgpu, self._device, self._target, width=width, height=height)
        ledger.clear()

        draws, vertices, indices = self._pipeline.staged_counts()
        self._telemetry = {
            "width": width,
            "height": height,
            "pixels_per_point": float(pixels_per_point),
            "primitives": len(primitives),
            "draws_staged": draws,
            "draws_issued": draws_issued,
            "vertices": vertices,
            "indices": indices,
            "ledger_entries": len(entries),
            "texture_updates": texture_updates,
            "texture_frees": texture_frees,
            "resident_textures": len(self._pipeline.texture_ids),
            "adapter_info": dict(self._adapter_info),
        }
        logger.debug(
            "snapshot_render size=(%d,%d) primitives=%d ledger_entries=%d "
            "texture_updates=%d texture_frees=%d",
            width,
            height,
            len(primitives),
            len(entries),
            texture_updates,
            texture_frees,
        )
        return image

    def telemetry(self) -> dict[str, object]:
        """Return counters describing the last render."""
        return dict(self._telemetry)

    def close(self) -> None:
        self._pipeline.close()
        self._pending_frees = ()
        if self._target is not None:
            self._target.destroy()
        self._target = None
        self._target_view = None
        self._target_size = (0, 0)

    def _ensure_target(self, width: int, height: int) -> Any:
        if self._target_view is not None and self._target_size == (width, height):
            return self._target_view
        if self._target is not None:
            self._target.destroy()
        wgpu = self._wgpu
        self._target = self._device.create_texture(
            label="frameprobe.target",
            size=(width, height, 1),
            mip_level_count=1,
            sample_count=1,
            dimension="2d",
            format=OUTPUT_FORMAT,
            usage=wgpu.TextureUsage.RENDER_ATTACHMENT | wgpu.TextureUsage.COPY_SRC,
        )
        self._target_view = self._target.create_view()
        self._target_size = (width, height)
        return self._target_view


def _select_adapter(adapters: list[Any], backends: tuple[str, ...]) -> Any:
    for backend in backends:
        for adapter in adapters:
            info = _extract_adapter_info(adapter)
            if str(info.get("backend_type", "")).lower() == backend:
                return adapter
    return adapters[0]


def _extract_adapter_info(adapter: Any) -> dict[str, object]:
    info = getattr(adapter, "info", None)
    if isinstance(info, dict):
        return {str(key): value for key, value in info.items()}
    return {}


__all__ = ["CLEAR_COLOR", "OUTPUT_FORMAT", "SnapshotRenderer"]
