"""Fixed-length force-vector genome driving one dot's lifetime."""

from __future__ import annotations

import math
import random
from typing import Iterator, Sequence

import numpy as np

from smartdots.agents.genome import Genome
from smartdots.core.vector import Vector2


def random_force(force_magnitude: float, rng: random.Random) -> Vector2:
    """Sample a uniformly random direction scaled to ``force_magnitude``."""
    angle = rng.random() * math.pi * 2.0
    return Vector2.from_angle(angle, force_magnitude)


class GeneSequence(Genome):
    """Ordered force vectors; gene ``i`` is the acceleration applied at step ``i``.

    Length is fixed at construction. ``mutate`` replaces individual genes but
    never inserts or removes them.
    """

    def __init__(self, genes: Sequence[Vector2], force_magnitude: float) -> None:
        self._genes: list[Vector2] = list(genes)
        self.force_magnitude = float(force_magnitude)
        self.last_mutated = 0

    @classmethod
    def random(cls, length: int, force_magnitude: float, rng: random.Random) -> "GeneSequence":
        """Create ``length`` random genes of magnitude ``force_magnitude``."""
        if length < 0:
            raise ValueError("Gene sequence length must be >= 0.")
        return cls([random_force(force_magnitude, rng) for _ in range(length)], force_magnitude)

    @classmethod
    def constant(cls, gene: Vector2, length: int) -> "GeneSequence":
        """Create a sequence repeating one gene, mostly useful for scripted dots."""
        if length < 0:
            raise ValueError("Gene sequence length must be >= 0.")
        return cls([gene] * length, gene.magnitude())

    @classmethod
    def from_list(cls, payload: Sequence[Sequence[float]], force_magnitude: float) -> "GeneSequence":
        """Rebuild from the ``[[x, y], ...]`` form produced by ``to_list``."""
        return cls([Vector2.from_sequence(item) for item in payload], force_magnitude)

    def __len__(self) -> int:
        return len(self._genes)

    def __getitem__(self, index: int) -> Vector2:
        return self._genes[index]

    def __iter__(self) -> Iterator[Vector2]:
        return iter(self._genes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeneSequence):
            return NotImplemented
        return self._genes == other._genes

    def __repr__(self) -> str:
        return f"GeneSequence(length={len(self._genes)}, force_magnitude={self.force_magnitude})"

    def clone(self) -> "GeneSequence":
        # Vector2 is frozen, so copying the list is enough to stop aliasing.
        return GeneSequence(list(self._genes), self.force_magnitude)

    def mutate(self, rate: float, rng: random.Random) -> None:
        """Replace each gene with a fresh random force with probability ``rate``."""
        self.last_mutated = 0
        for index in range(len(self._genes)):
            if rng.random() < rate:
                self._genes[index] = random_force(self.force_magnitude, rng)
                self.last_mutated += 1

    def distance(self, other: Genome) -> float:
        """Mean per-gene Euclidean distance between two equal-length sequences."""
        if not isinstance(other, GeneSequence):
            raise TypeError("GeneSequence distance requires another GeneSequence.")
        if len(self) != len(other):
            raise ValueError("GeneSequence distance requires equal lengths.")
        if not self._genes:
            return 0.0
        diff = self.as_array() - other.as_array()
        return float(np.linalg.norm(diff, axis=1).mean())

    def as_array(self) -> np.ndarray:
        """Return genes as an ``(n, 2)`` float array."""
        return np.array([gene.as_tuple() for gene in self._genes], dtype=float).reshape(-1, 2)

    def to_list(self) -> list[list[float]]:
        return [[float(gene.x), float(gene.y)] for gene in self._genes]
