"""Genome contracts for evolutionary operators."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod


class Genome(ABC):
    """Abstract genome representation used by evolutionary strategies.

    Implementations own their encoded parameters exclusively. Copies made via
    ``clone`` must never alias the source, so mutating an offspring cannot
    leak back into its parent.
    """

    @abstractmethod
    def clone(self) -> "Genome":
        """Return an independent deep copy of this genome.

        Returns:
            Genome: New genome with equal contents and no shared mutable state.
        """

    @abstractmethod
    def mutate(self, rate: float, rng: random.Random) -> None:
        """Mutate this genome in place.

        Args:
            rate (float): Per-element mutation probability in ``[0, 1]``.
            rng (random.Random): Injected random source.

        Invariants:
            - Genome length never changes.
            - Behavior is deterministic given equivalent RNG state.
        """

    @abstractmethod
    def distance(self, other: "Genome") -> float:
        """Measure distance between this genome and ``other``.

        Args:
            other (Genome): Genome to compare against.

        Returns:
            float: Non-negative distance metric value.

        Invariants:
            - Distance must be deterministic for equivalent inputs.
            - Distance must be non-negative.
        """
