"""Bounded 2-D arena with a fixed target for dot simulations."""

from __future__ import annotations

from dataclasses import dataclass
from smartdots.core.vector import Vector2


@dataclass(frozen=True)
class Arena:
    """Axis-aligned rectangle ``[0, width] x [0, height]`` plus a capture target.

    The arena is immutable for a run. Positions exactly on an edge are still
    inside; only coordinates strictly below zero or strictly above the
    corresponding dimension count as leaving the arena.
    """

    width: float
    height: float
    target: Vector2
    start: Vector2
    capture_radius: float

    def contains(self, position: Vector2) -> bool:
        return 0.0 <= position.x <= self.width and 0.0 <= position.y <= self.height

    def distance_to_target(self, position: Vector2) -> float:
        return position.distance_to(self.target)

    def is_captured(self, position: Vector2) -> bool:
        """True when ``position`` lies strictly inside the capture radius."""
        return self.distance_to_target(position) < self.capture_radius
