"""Environment-sourced harness configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_SCREEN_SIZE: tuple[int, int] = (800, 600)
DEFAULT_PIXELS_PER_POINT = 1.0


@dataclass(frozen=True, slots=True)
class HarnessConfig:
    """One-shot construction inputs of a harness."""

    width: float = float(DEFAULT_SCREEN_SIZE[0])
    height: float = float(DEFAULT_SCREEN_SIZE[1])
    pixels_per_point: float = DEFAULT_PIXELS_PER_POINT
    debug_input: bool = False


@dataclass(frozen=True, slots=True)
class RendererConfig:
    """Adapter selection for the snapshot renderer.

    Empty `wgpu_backends` selects the first enumerated adapter.
    """

    wgpu_backends: tuple[str, ...] = ()


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _flag(name: str, default: bool, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return bool(default)
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _float(
    name: str,
    default: float,
    *,
    minimum: float | None = None,
    env: Mapping[str, str] | None = None,
) -> float:
    raw = _raw(name, env=env)
    if raw is None:
        value = float(default)
    else:
        try:
            value = float(raw.strip())
        except ValueError:
            value = float(default)
    if minimum is None:
        return value
    return max(float(minimum), value)


def _text(name: str, default: str, *, env: Mapping[str, str] | None = None) -> str:
    raw = _raw(name, env=env)
    if raw is None:
        return str(default)
    value = raw.strip()
    return value if value else str(default)


def _csv(name: str, *, env: Mapping[str, str] | None = None) -> tuple[str, ...]:
    raw = _text(name, "", env=env)
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _resolution(raw: str) -> tuple[int, int] | None:
    value = str(raw).strip().lower()
    if not value:
        return None
    normalized = value.replace(" ", "")
    for sep in ("x", ",", ":"):
        if sep in normalized:
            left, right = normalized.split(sep, 1)
            try:
                width = max(1, int(left))
                height = max(1, int(right))
            except ValueError:
                return None
            return (width, height)
    return None


def resolve_log_level_name(default: str = "INFO", *, env: Mapping[str, str] | None = None) -> str:
    """Resolve log level with harness-prefixed override."""
    value = _raw("FRAMEPROBE_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env)
    if value is None or not value.strip():
        value = default
    return value.strip().upper()


def load_harness_config(*, env: Mapping[str, str] | None = None) -> HarnessConfig:
    size = _resolution(_text("FRAMEPROBE_SCREEN_SIZE", "", env=env)) or DEFAULT_SCREEN_SIZE
    return HarnessConfig(
        width=float(size[0]),
        height=float(size[1]),
        pixels_per_point=_float(
            "FRAMEPROBE_PIXELS_PER_POINT",
            DEFAULT_PIXELS_PER_POINT,
            minimum=0.1,
            env=env,
        ),
        debug_input=_flag("FRAMEPROBE_DEBUG_INPUT", False, env=env),
    )


def load_renderer_config(*, env: Mapping[str, str] | None = None) -> RendererConfig:
    return RendererConfig(
        wgpu_backends=tuple(item.lower() for item in _csv("FRAMEPROBE_WGPU_BACKENDS", env=env)),
    )


__all__ = [
    "DEFAULT_PIXELS_PER_POINT",
    "DEFAULT_SCREEN_SIZE",
    "HarnessConfig",
    "RendererConfig",
    "load_harness_config",
    "load_renderer_config",
    "resolve_log_level_name",
]
