"""Fitness shaping for dots racing toward a target."""

from __future__ import annotations


def reach_fitness(distance: float, reached: bool, steps_used: int, gene_length: int) -> float:
    """Score a finished dot from its terminal state.

    The base term ``1 / (distance + 1)`` lies in ``(0, 1]``. Dots that reached
    the target add ``1 + (gene_length - steps_used) / gene_length``, a bonus in
    ``(1, 2]`` that grows the fewer steps were spent, so every reaching dot
    outranks every dot that did not reach.

    Args:
        distance: Final distance from the dot to the target.
        reached: Whether the dot ended inside the capture radius.
        steps_used: Genes consumed before the dot stopped.
        gene_length: Total genes available to the dot.

    Returns:
        float: Strictly positive fitness score.
    """
    if gene_length <= 0:
        raise ValueError("gene_length must be > 0")
    if distance < 0.0:
        raise ValueError("distance must be >= 0")

    fitness = 1.0 / (float(distance) + 1.0)
    if reached:
        fitness += 1.0 + float(gene_length - steps_used) / float(gene_length)
    return fitness
