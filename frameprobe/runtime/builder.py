"""Fluent construction of harness instances."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from frameprobe.api.app_port import AccessibilityFactory, AppCallback, AppContext
from frameprobe.runtime.config import HarnessConfig, load_harness_config
from frameprobe.runtime.harness import Harness


@dataclass(slots=True)
class HarnessBuilder:
    """Collect one-shot harness inputs; defaults come from the environment."""

    accessibility_factory: AccessibilityFactory
    config: HarnessConfig = field(default_factory=load_harness_config)

    def with_size(self, width: float, height: float) -> "HarnessBuilder":
        if width <= 0 or height <= 0:
            raise ValueError("size must be positive")
        self.config = replace(self.config, width=float(width), height=float(height))
        return self

    def with_pixels_per_point(self, pixels_per_point: float) -> "HarnessBuilder":
        if pixels_per_point <= 0:
            raise ValueError("pixels_per_point must be > 0")
        self.config = replace(self.config, pixels_per_point=float(pixels_per_point))
        return self

    def with_debug_input(self, enabled: bool = True) -> "HarnessBuilder":
        self.config = replace(self.config, debug_input=bool(enabled))
        return self

    def with_accessibility_factory(self, factory: AccessibilityFactory) -> "HarnessBuilder":
        self.accessibility_factory = factory
        return self

    def build(self, context: AppContext, app: AppCallback) -> Harness:
        """Create the harness; runs `app` once for the initial frame."""
        return Harness(
            context,
            app,
            accessibility_factory=self.accessibility_factory,
            config=self.config,
        )


__all__ = ["HarnessBuilder"]
