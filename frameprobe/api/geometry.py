"""Logical-point geometry primitives."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Pos2:
    """Point in logical points."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True, slots=True)
class Vec2:
    """Size or offset in logical points."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle in logical points."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_min_size(cls, origin: Pos2, size: Vec2) -> "Rect":
        return cls(origin.x, origin.y, origin.x + size.x, origin.y + size.y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def size(self) -> Vec2:
        return Vec2(self.width, self.height)

    def scaled(self, factor: float) -> "Rect":
        """Return the rectangle multiplied by `factor`, e.g. points to pixels."""
        return Rect(
            self.min_x * factor,
            self.min_y * factor,
            self.max_x * factor,
            self.max_y * factor,
        )


__all__ = ["Pos2", "Rect", "Vec2"]
