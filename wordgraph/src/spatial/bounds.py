"""Axis-aligned rectangles for spatial partitioning."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Rect:
    """Half-open rectangle ``[x_min, x_max) × [y_min, y_max)``.

    Half-open edges make the four quadrants of a rectangle partition it
    exactly: every contained point belongs to exactly one quadrant.
    """

    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @classmethod
    def canvas(cls, width: float, height: float, scale: float = 1.0) -> "Rect":
        """Origin-centred rectangle of ``scale`` times the canvas size."""
        half_w = width * scale / 2.0
        half_h = height * scale / 2.0
        return cls(-half_w, -half_h, half_w, half_h)

    @classmethod
    def enclosing(cls, positions: np.ndarray, padding: float = 1.0) -> "Rect":
        """Smallest rectangle holding every row of ``positions`` (strictly inside)."""
        if len(positions) == 0:
            return cls(-padding, -padding, padding, padding)
        mins = positions.min(axis=0)
        maxs = positions.max(axis=0)
        return cls(
            float(mins[0]) - padding,
            float(mins[1]) - padding,
            float(maxs[0]) + padding,
            float(maxs[1]) + padding,
        )

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.x_min + self.x_max) / 2.0, (self.y_min + self.y_max) / 2.0)

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x < self.x_max and self.y_min <= y < self.y_max

    def intersects(self, other: "Rect") -> bool:
        return (
            self.x_min < other.x_max
            and other.x_min < self.x_max
            and self.y_min < other.y_max
            and other.y_min < self.y_max
        )

    def union(self, other: "Rect") -> "Rect":
        return Rect(
            min(self.x_min, other.x_min),
            min(self.y_min, other.y_min),
            max(self.x_max, other.x_max),
            max(self.y_max, other.y_max),
        )

    def quadrants(self) -> Tuple["Rect", "Rect", "Rect", "Rect"]:
        """Four equal children: (low-x, low-y), (high-x, low-y), (low-x, high-y), (high-x, high-y)."""
        mid_x, mid_y = self.center
        return (
            Rect(self.x_min, self.y_min, mid_x, mid_y),
            Rect(mid_x, self.y_min, self.x_max, mid_y),
            Rect(self.x_min, mid_y, mid_x, self.y_max),
            Rect(mid_x, mid_y, self.x_max, self.y_max),
        )
