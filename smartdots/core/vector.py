"""Immutable 2-D vector value type used for positions, velocities and genes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Vector2:
    """Two-component float vector.

    Instances never change; every arithmetic helper returns a new vector.
    """

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def zero(cls) -> "Vector2":
        return cls(0.0, 0.0)

    @classmethod
    def from_angle(cls, angle: float, magnitude: float = 1.0) -> "Vector2":
        """Build a vector pointing along ``angle`` (radians) with ``magnitude``."""
        return cls(math.cos(angle) * magnitude, math.sin(angle) * magnitude)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "Vector2":
        """Build from a two-element list/tuple such as a config or snapshot entry."""
        if len(values) != 2:
            raise ValueError(f"Vector2 requires exactly two components, got {len(values)}.")
        return cls(float(values[0]), float(values[1]))

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def scale(self, factor: float) -> "Vector2":
        return Vector2(self.x * factor, self.y * factor)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Vector2") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def limit(self, max_magnitude: float) -> "Vector2":
        """Return this vector rescaled to ``max_magnitude`` when it is longer.

        Direction is preserved; vectors already within the cap are returned
        unchanged.
        """
        mag = self.magnitude()
        if mag > max_magnitude:
            return Vector2(self.x / mag * max_magnitude, self.y / mag * max_magnitude)
        return self

    def as_tuple(self) -> tuple[float, float]:
        return (float(self.x), float(self.y))
