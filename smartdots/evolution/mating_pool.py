"""Elitist fitness-proportional strategy backed by a weighted mating pool."""

from __future__ import annotations

import math
import random
from typing import Sequence

from smartdots.agents.genes import GeneSequence
from smartdots.evolution.base import EvolutionError, EvolutionStrategy


class MatingPoolStrategy(EvolutionStrategy):
    """Elitism, then clone-and-mutate parents drawn from a 100-slot pool.

    Each parent enters the pool ``floor(fitness / max_fitness * resolution)``
    times, so the best genome always holds ``resolution`` slots and genomes
    scoring under ``1 / resolution`` of the best never reproduce.
    """

    def __init__(self, mutation_rate: float = 0.01, elite_count: int = 4, pool_resolution: int = 100) -> None:
        if not 0.0 <= mutation_rate <= 1.0:
            raise ValueError("mutation_rate must be in [0.0, 1.0]")
        if elite_count < 0:
            raise ValueError("elite_count must be >= 0")
        if pool_resolution <= 0:
            raise ValueError("pool_resolution must be > 0")
        self.mutation_rate = mutation_rate
        self.elite_count = elite_count
        self.pool_resolution = pool_resolution
        self.last_pool_size: int = 0
        self.last_mutation_ratio: float = 0.0

    def evolve(
        self,
        ranked_genomes: Sequence[GeneSequence],
        fitness: Sequence[float],
        rng: random.Random,
    ) -> list[GeneSequence]:
        """Return next genomes with preserved size."""
        if len(ranked_genomes) != len(fitness):
            raise ValueError("Genome and fitness lengths must match.")
        if not ranked_genomes:
            return []

        size = len(ranked_genomes)
        if self.elite_count > size:
            raise ValueError("elite_count must not exceed population size")
        next_genomes = [genome.clone() for genome in ranked_genomes[: self.elite_count]]

        pool = self.build_pool(ranked_genomes, fitness)
        self.last_pool_size = len(pool)

        mutated_genes = 0
        offspring_genes = 0
        while len(next_genomes) < size:
            parent = pool[rng.randrange(len(pool))]
            child = parent.clone()
            child.mutate(self.mutation_rate, rng)
            mutated_genes += child.last_mutated
            offspring_genes += len(child)
            next_genomes.append(child)

        self.last_mutation_ratio = float(mutated_genes) / float(offspring_genes) if offspring_genes else 0.0
        return next_genomes

    def build_pool(
        self,
        ranked_genomes: Sequence[GeneSequence],
        fitness: Sequence[float],
    ) -> list[GeneSequence]:
        """Expand ranked genomes into the weighted mating pool.

        Raises:
            EvolutionError: If the best fitness is not positive or no genome
                earns a slot.
        """
        max_fitness = max(float(score) for score in fitness)
        if not max_fitness > 0.0:
            raise EvolutionError(f"Mating pool requires a positive best fitness, got {max_fitness}.")

        pool: list[GeneSequence] = []
        for genome, score in zip(ranked_genomes, fitness):
            slots = math.floor(float(score) / max_fitness * self.pool_resolution)
            pool.extend([genome] * max(0, slots))

        if not pool:
            raise EvolutionError("Mating pool is empty.")
        return pool
