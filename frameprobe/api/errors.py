"""Harness exception taxonomy."""

from __future__ import annotations


class HarnessError(RuntimeError):
    """Base class for fatal harness failures."""


class AccessibilityUnavailableError(HarnessError):
    """The application context produced a frame without an accessibility update."""


class RendererInitError(HarnessError):
    """Snapshot renderer initialization failure with structured details."""

    def __init__(self, message: str, *, details: dict[str, object]) -> None:
        super().__init__(message)
        self.details = details


class TextureUpdateError(HarnessError):
    """A texture delta cannot be applied to GPU-resident storage."""


__all__ = [
    "AccessibilityUnavailableError",
    "HarnessError",
    "RendererInitError",
    "TextureUpdateError",
]
