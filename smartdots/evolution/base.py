"""Evolution strategy contracts."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Sequence

from smartdots.agents.genes import GeneSequence


class EvolutionError(RuntimeError):
    """Raised when a strategy cannot build the next generation."""


class EvolutionStrategy(ABC):
    """Abstract interface for population evolution algorithms.

    Strategies operate on genomes only. Agents, physics and fitness evaluation
    stay with the population, which hands over genomes already ranked
    best-first together with their aligned fitness values.
    """

    @abstractmethod
    def evolve(
        self,
        ranked_genomes: Sequence[GeneSequence],
        fitness: Sequence[float],
        rng: random.Random,
    ) -> list[GeneSequence]:
        """Generate next-generation genomes from ranked parents.

        Args:
            ranked_genomes (Sequence[GeneSequence]): Current genomes sorted by
                descending fitness.
            fitness (Sequence[float]): Fitness scores aligned by index with
                ``ranked_genomes``.
            rng (random.Random): Injected random source.

        Returns:
            list[GeneSequence]: Next generation genomes, independently owned.

        Invariants:
            - Output size must equal input size.
            - Must not mutate the input genomes.
            - Deterministic under equivalent RNG state.
        """
