from __future__ import annotations

import sys

import numpy as np
import pytest

from frameprobe.api.errors import RendererInitError, TextureUpdateError
from frameprobe.api.textures import ColorImage, ImageDelta, TexturesDelta
from frameprobe.rendering.snapshot_renderer import SnapshotRenderer
from frameprobe.runtime.config import HarnessConfig, RendererConfig
from frameprobe.runtime.harness import Harness
from tests.frameprobe.conftest import (
    FakeAccessibilityState,
    FakeContext,
    white_texture_delta,
)
from tests.frameprobe.fake_wgpu import FakeAdapter, FakeDevice, install_fake_wgpu

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


def _rect_app(x: float = 10.0, y: float = 10.0, w: float = 20.0, h: float = 20.0):
    def app(ctx: FakeContext) -> None:
        ctx.label("box")
        ctx.rect(x, y, w, h)

    return app


def _harness(context: FakeContext | None = None, app=None, **config) -> Harness:
    cfg = {"width": 64.0, "height": 48.0, **config}
    return Harness(
        context if context is not None else FakeContext(),
        app if app is not None else _rect_app(),
        accessibility_factory=FakeAccessibilityState,
        config=HarnessConfig(**cfg),
    )


def _renderer(monkeypatch, adapters: list[FakeAdapter] | None = None, **config) -> tuple[SnapshotRenderer, FakeDevice]:
    installed = install_fake_wgpu(monkeypatch, adapters)
    renderer = SnapshotRenderer(config=RendererConfig(**config))
    device = next(adapter.device for adapter in installed if adapter.requests)
    return renderer, device


def test_renders_rect_over_black_background(monkeypatch) -> None:
    renderer, _ = _renderer(monkeypatch)
    harness = _harness()

    image = harness.render(renderer)

    assert (image.width, image.height) == (64, 48)
    assert image.pixel(15, 15) == WHITE
    assert image.pixel(10, 10) == WHITE
    assert image.pixel(29, 29) == WHITE
    assert image.pixel(30, 30) == BLACK
    assert image.pixel(5, 5) == BLACK
    assert image.pixel(63, 47) == BLACK


def test_render_scales_target_by_pixel_density(monkeypatch) -> None:
    renderer, _ = _renderer(monkeypatch)
    harness = _harness(pixels_per_point=2.0)

    image = renderer.render(harness)

    assert (image.width, image.height) == (128, 96)
    assert image.pixel(25, 25) == WHITE
    assert image.pixel(19, 19) == BLACK
    assert image.pixel(60, 60) == BLACK
    context = harness.context
    assert isinstance(context, FakeContext)
    assert context.tessellate_calls[-1][1] == 2.0


def test_staged_uploads_are_submitted_before_render_pass(monkeypatch) -> None:
    renderer, device = _renderer(monkeypatch)
    harness = _harness()

    renderer.render(harness)

    assert device.queue.submissions == [
        ["frameprobe.upload", "frameprobe.render"],
        ["frameprobe.readback"],
    ]
    assert device.queue.wait_calls == 1
    assert all(render_pass.ended for render_pass in device.render_passes())


def test_render_consumes_ledger_and_is_repeatable(monkeypatch) -> None:
    renderer, _ = _renderer(monkeypatch)
    harness = _harness()
    harness.run_steps(2)
    assert len(harness.texture_ledger) == 3

    first = renderer.render(harness)
    assert len(harness.texture_ledger) == 0
    assert renderer.telemetry()["texture_updates"] == 1

    second = renderer.render(harness)

    assert first.same_pixels(second)
    assert renderer.telemetry()["texture_updates"] == 0
    assert renderer.telemetry()["ledger_entries"] == 0


def test_ledger_holds_one_entry_per_frame_since_last_render(monkeypatch) -> None:
    renderer, _ = _renderer(monkeypatch)
    harness = _harness()
    renderer.render(harness)

    harness.run_steps(4)
    assert len(harness.texture_ledger) == 4

    renderer.render(harness)
    assert len(harness.texture_ledger) == 0


def test_newest_frees_wait_for_next_frame(monkeypatch) -> None:
    renderer, _ = _renderer(monkeypatch)
    context = FakeContext(texture_deltas=[white_texture_delta(), TexturesDelta(free=(0,))])
    harness = _harness(context)
    harness.run()

    first = renderer.render(harness)
    assert first.pixel(15, 15) == WHITE
    assert renderer.telemetry()["texture_frees"] == 0
    assert renderer.telemetry()["resident_textures"] == 1

    second = renderer.render(harness)

    assert first.same_pixels(second)
    assert renderer.telemetry()["texture_frees"] == 0
    assert renderer.telemetry()["resident_textures"] == 1

    harness.run()
    renderer.render(harness)

    assert renderer.telemetry()["texture_frees"] == 1
    assert renderer.telemetry()["resident_textures"] == 0


def test_older_frees_apply_in_order(monkeypatch) -> None:
    renderer, _ = _renderer(monkeypatch)
    context = FakeContext(
        texture_deltas=[white_texture_delta(), TexturesDelta(free=(0,)), TexturesDelta()]
    )
    harness = _harness(context)
    harness.run_steps(2)

    image = renderer.render(harness)

    assert image.pixel(15, 15) == BLACK
    assert renderer.telemetry()["texture_frees"] == 1


def test_later_update_to_same_texture_supersedes_earlier(monkeypatch) -> None:
    renderer, device = _renderer(monkeypatch)
    black = np.zeros((1, 1, 4), dtype=np.uint8)
    context = FakeContext(
        texture_deltas=[
            white_texture_delta(),
            TexturesDelta(set=((0, ImageDelta(ColorImage(black))),)),
        ]
    )
    harness = _harness(context)
    harness.run()

    renderer.render(harness)

    live = [texture for texture in device.textures if texture.label == "frameprobe.texture.0"]
    assert len(live) == 2
    assert live[0].destroyed
    assert not live[1].destroyed
    assert tuple(live[1].pixels[0, 0]) == (0, 0, 0, 0)


def test_failed_texture_update_keeps_ledger(monkeypatch) -> None:
    renderer, _ = _renderer(monkeypatch)
    patch = np.full((1, 1, 4), 255, dtype=np.uint8)
    context = FakeContext(
        texture_deltas=[TexturesDelta(set=((7, ImageDelta(ColorImage(patch), pos=(0, 0))),))]
    )
    harness = _harness(context)

    with pytest.raises(TextureUpdateError):
        renderer.render(harness)

    assert len(harness.texture_ledger) == 1


def test_target_is_reused_until_size_changes(monkeypatch) -> None:
    renderer, device = _renderer(monkeypatch)
    harness = _harness()

    renderer.render(harness)
    renderer.render(harness)
    targets = [texture for texture in device.textures if texture.label == "frameprobe.target"]
    assert len(targets) == 1

    harness.set_size(32.0, 32.0).run()
    image = renderer.render(harness)

    targets = [texture for texture in device.textures if texture.label == "frameprobe.target"]
    assert len(targets) == 2
    assert targets[0].destroyed
    assert (image.width, image.height) == (32, 32)


def test_empty_screen_is_rejected(monkeypatch) -> None:
    renderer, _ = _renderer(monkeypatch)
    harness = _harness()
    harness.set_size(0.0, 10.0).run()

    with pytest.raises(ValueError):
        renderer.render(harness)


def test_telemetry_reports_last_render(monkeypatch) -> None:
    renderer, _ = _renderer(monkeypatch)
    harness = _harness()
    assert renderer.telemetry() == {}

    renderer.render(harness)

    telemetry = renderer.telemetry()
    assert telemetry["width"] == 64
    assert telemetry["height"] == 48
    assert telemetry["primitives"] == 1
    assert telemetry["draws_issued"] == 1
    assert telemetry["vertices"] == 4
    assert telemetry["indices"] == 6
    assert telemetry["resident_textures"] == 1


def test_missing_wgpu_raises_init_error(monkeypatch) -> None:
    monkeypatch.setitem(sys.modules, "wgpu", None)

    with pytest.raises(RendererInitError) as exc_info:
        SnapshotRenderer(config=RendererConfig())

    assert str(exc_info.value) == "wgpu dependency unavailable"
    assert exc_info.value.details["exception_type"] == "ModuleNotFoundError"


def test_no_adapter_raises_init_error(monkeypatch) -> None:
    install_fake_wgpu(monkeypatch, adapters=[])

    with pytest.raises(RendererInitError) as exc_info:
        SnapshotRenderer(config=RendererConfig(wgpu_backends=("vulkan",)))

    assert str(exc_info.value) == "no adapter found"
    assert exc_info.value.details["requested_backends"] == ("vulkan",)


def test_device_failure_raises_init_error(monkeypatch) -> None:
    install_fake_wgpu(monkeypatch, adapters=[FakeAdapter(fail=True)])

    with pytest.raises(RendererInitError) as exc_info:
        SnapshotRenderer(config=RendererConfig())

    assert str(exc_info.value) == "failed to create device"
    details = exc_info.value.details
    assert details["exception_type"] == "RuntimeError"
    assert details["adapter_info"] == {"backend_type": "Vulkan", "description": "fake"}


def test_backend_preference_selects_matching_adapter(monkeypatch) -> None:
    metal = FakeAdapter(info={"backend_type": "Metal", "description": "metal"})
    vulkan = FakeAdapter(info={"backend_type": "Vulkan", "description": "vulkan"})
    install_fake_wgpu(monkeypatch, adapters=[metal, vulkan])

    renderer = SnapshotRenderer(config=RendererConfig(wgpu_backends=("vulkan",)))

    assert vulkan.requests == 1
    assert metal.requests == 0
    assert renderer.adapter_info["description"] == "vulkan"


def test_close_releases_target_and_textures(monkeypatch) -> None:
    renderer, device = _renderer(monkeypatch)
    harness = _harness()
    renderer.render(harness)

    renderer.close()

    assert all(texture.destroyed for texture in device.textures)
