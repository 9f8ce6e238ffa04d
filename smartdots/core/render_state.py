"""Immutable read-only snapshots handed to rendering drivers."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AgentState:
    """Per-dot snapshot."""

    id: str
    position: tuple[float, float]
    velocity: tuple[float, float]
    status: str
    steps_used: int
    fitness: float | None = None


@dataclass(frozen=True)
class EnvironmentState:
    """Arena snapshot."""

    bounds: tuple[float, float]
    target: tuple[float, float]
    start: tuple[float, float]
    capture_radius: float


@dataclass(frozen=True)
class PopulationSnapshot:
    """Top-level immutable frame of one population at one tick."""

    generation_count: int
    step_index: int
    agents: tuple[AgentState, ...]
    environment: EnvironmentState
    metrics: dict[str, float] = field(default_factory=dict)

    def count_status(self, status: str) -> int:
        return sum(1 for agent in self.agents if agent.status == status)
