"""Gene-driven particle agent ("dot")."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from smartdots.agents.base import Agent, AgentStatus
from smartdots.agents.genes import GeneSequence
from smartdots.core.vector import Vector2
from smartdots.environment.arena import Arena
from smartdots.evolution.fitness import reach_fitness


class AgentStateError(RuntimeError):
    """Raised when an agent operation is invoked in the wrong lifecycle state."""


@dataclass
class Dot(Agent):
    """Particle that applies one gene as acceleration per step.

    Physics per step: ``velocity += gene``, velocity clamped to ``max_speed``,
    ``position += velocity``. Leaving the arena kills the dot; entering the
    capture radius marks it reached. The boundary test runs first, so a dot
    that is out of bounds and captured at once ends ``DEAD``.
    """

    genes: GeneSequence
    arena: Arena
    max_speed: float
    agent_id: str = ""
    position: Vector2 = field(default_factory=Vector2.zero, init=False)
    velocity: Vector2 = field(default_factory=Vector2.zero, init=False)
    acceleration: Vector2 = field(default_factory=Vector2.zero, init=False)
    cursor: int = field(default=0, init=False)
    status: AgentStatus = field(default=AgentStatus.ALIVE, init=False)
    fitness: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        self.spawn(self.arena.start)

    def spawn(self, start_position: Vector2) -> None:
        self.position = start_position
        self.velocity = Vector2.zero()
        self.acceleration = Vector2.zero()
        self.cursor = 0
        self.status = AgentStatus.ALIVE
        self.fitness = 0.0

    def step(self) -> None:
        if self.status.is_terminal:
            return

        if self.cursor < len(self.genes):
            self.acceleration = self.genes[self.cursor]
            self.cursor += 1
        else:
            # out of moves
            self.status = AgentStatus.DEAD
            return

        self.velocity = (self.velocity + self.acceleration).limit(self.max_speed)
        self.position = self.position + self.velocity

        if not self.arena.contains(self.position):
            self.status = AgentStatus.DEAD
        elif self.arena.is_captured(self.position):
            self.status = AgentStatus.REACHED

    def evaluate_fitness(self) -> float:
        """Compute, store and return fitness for a terminal dot.

        Raises:
            AgentStateError: If the dot is still alive.
        """
        if not self.status.is_terminal:
            raise AgentStateError(f"Dot '{self.agent_id}' is still alive; fitness is undefined.")
        self.fitness = reach_fitness(
            distance=self.arena.distance_to_target(self.position),
            reached=self.status is AgentStatus.REACHED,
            steps_used=self.cursor,
            gene_length=len(self.genes),
        )
        return self.fitness

    def clone_with_sequence(self, genes: GeneSequence, agent_id: str = "") -> "Dot":
        """Return a freshly spawned dot sharing this dot's arena and physics."""
        return Dot(genes=genes, arena=self.arena, max_speed=self.max_speed, agent_id=agent_id)

    def get_genome(self) -> GeneSequence:
        return self.genes

    def to_dict(self) -> dict[str, Any]:
        """Serialize dot state for render/export."""
        return {
            "id": self.agent_id,
            "position": list(self.position.as_tuple()),
            "velocity": list(self.velocity.as_tuple()),
            "status": self.status.value,
            "cursor": int(self.cursor),
            "fitness": float(self.fitness),
        }
