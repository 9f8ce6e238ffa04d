"""Agent interface definitions."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod

from smartdots.agents.genome import Genome
from smartdots.core.vector import Vector2


class AgentStatus(str, enum.Enum):
    """Lifecycle states of a simulated agent.

    ``DEAD`` and ``REACHED`` are terminal and absorbing.
    """

    ALIVE = "alive"
    DEAD = "dead"
    REACHED = "reached"

    @property
    def is_terminal(self) -> bool:
        return self is not AgentStatus.ALIVE


class Agent(ABC):
    """Abstract simulated entity controlled by a genome.

    Agents encapsulate per-step behavior and genome ownership but remain
    decoupled from selection and population-level evolution logic.
    """

    status: AgentStatus

    @abstractmethod
    def spawn(self, start_position: Vector2) -> None:
        """Reset lifecycle state and place the agent at ``start_position``.

        Invariants:
            - Status becomes ``ALIVE`` and fitness resets to zero.
            - The owned genome is left untouched.
        """

    @abstractmethod
    def step(self) -> None:
        """Advance the agent by one simulation tick.

        Invariants:
            - Must be a no-op once the agent is terminal.
            - Must not touch other agents.
        """

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @abstractmethod
    def get_genome(self) -> Genome:
        """Return the genome currently associated with this agent.

        Returns:
            Genome: Agent genome instance.
        """
