"""Population of dots: stepping, completion detection and reproduction."""

from __future__ import annotations

import logging
import random
from statistics import mean
from typing import Sequence

from smartdots.agents.base import AgentStatus
from smartdots.agents.dot import Dot
from smartdots.agents.genes import GeneSequence
from smartdots.core.config_loader import EvolutionSettings
from smartdots.core.render_state import AgentState, EnvironmentState, PopulationSnapshot
from smartdots.evolution.base import EvolutionStrategy
from smartdots.evolution.mating_pool import MatingPoolStrategy

LOGGER = logging.getLogger(__name__)


class GenerationIncompleteError(RuntimeError):
    """Raised when reproduction is requested while dots are still alive."""


class Population:
    """Fixed-size cohort of dots evolving toward the arena target.

    All randomness flows through the injected ``rng`` so that equal seeds and
    settings replay identical generations.
    """

    def __init__(
        self,
        settings: EvolutionSettings,
        rng: random.Random,
        strategy: EvolutionStrategy | None = None,
    ) -> None:
        self.settings = settings
        self.rng = rng
        self.arena = settings.arena()
        self.strategy = strategy or MatingPoolStrategy(
            mutation_rate=settings.mutation_rate,
            elite_count=settings.elite_count,
        )
        self.generation_count = 1
        self.step_index = 0
        self.last_generation_metrics: dict[str, float] | None = None
        self._agents: list[Dot] = [
            self._new_dot(
                GeneSequence.random(settings.gene_length, settings.force_magnitude, rng),
                index,
            )
            for index in range(settings.population_size)
        ]

    @property
    def agents(self) -> tuple[Dot, ...]:
        return tuple(self._agents)

    def __len__(self) -> int:
        return len(self._agents)

    def step(self) -> None:
        """Advance every dot by one tick; dots never interact."""
        for agent in self._agents:
            agent.step()
        self.step_index += 1

    def is_generation_complete(self) -> bool:
        return all(agent.is_terminal for agent in self._agents)

    def alive_count(self) -> int:
        return sum(1 for agent in self._agents if agent.status is AgentStatus.ALIVE)

    def reached_count(self) -> int:
        return sum(1 for agent in self._agents if agent.status is AgentStatus.REACHED)

    def evaluate(self) -> list[float]:
        """Evaluate and return fitness for every dot, in population order."""
        return [agent.evaluate_fitness() for agent in self._agents]

    def reproduce(self) -> None:
        """Replace the finished generation with its offspring.

        Raises:
            GenerationIncompleteError: If any dot is still alive. State is left
                untouched in that case.
        """
        if not self.is_generation_complete():
            raise GenerationIncompleteError(
                f"Generation {self.generation_count} still has {self.alive_count()} live dot(s)."
            )

        self.evaluate()
        # sorted() is stable, so equal fitness keeps prior order.
        ranked = sorted(self._agents, key=lambda agent: agent.fitness, reverse=True)
        ranked_genomes = [agent.genes for agent in ranked]
        fitness = [agent.fitness for agent in ranked]

        next_genomes = self.strategy.evolve(ranked_genomes, fitness, self.rng)
        if len(next_genomes) != len(self._agents):
            raise ValueError("Evolution strategy must preserve population size.")

        self.last_generation_metrics = self._compute_metrics(ranked)
        LOGGER.debug(
            "Generation %d finished: max_fitness=%.4f reached=%d/%d",
            self.generation_count,
            self.last_generation_metrics["max_fitness"],
            int(self.last_generation_metrics["reached_count"]),
            len(ranked),
        )

        parent = ranked[0]
        self._agents = [
            parent.clone_with_sequence(genes, agent_id=f"dot_{index}") for index, genes in enumerate(next_genomes)
        ]
        self.generation_count += 1
        self.step_index = 0

    def snapshot(self) -> PopulationSnapshot:
        """Return an immutable view of dot positions and statuses."""
        agents = tuple(
            AgentState(
                id=agent.agent_id,
                position=agent.position.as_tuple(),
                velocity=agent.velocity.as_tuple(),
                status=agent.status.value,
                steps_used=agent.cursor,
                fitness=agent.fitness if agent.is_terminal else None,
            )
            for agent in self._agents
        )
        environment = EnvironmentState(
            bounds=(self.arena.width, self.arena.height),
            target=self.arena.target.as_tuple(),
            start=self.arena.start.as_tuple(),
            capture_radius=self.arena.capture_radius,
        )
        return PopulationSnapshot(
            generation_count=self.generation_count,
            step_index=self.step_index,
            agents=agents,
            environment=environment,
            metrics=dict(self.last_generation_metrics or {}),
        )

    def _new_dot(self, genes: GeneSequence, index: int) -> Dot:
        return Dot(genes=genes, arena=self.arena, max_speed=self.settings.max_speed, agent_id=f"dot_{index}")

    def _compute_metrics(self, ranked: Sequence[Dot]) -> dict[str, float]:
        fitness = [agent.fitness for agent in ranked]
        reached = [agent for agent in ranked if agent.status is AgentStatus.REACHED]
        best_genes = ranked[0].genes
        return {
            "generation": float(self.generation_count),
            "mean_fitness": float(mean(fitness)),
            "max_fitness": float(max(fitness)),
            "min_fitness": float(min(fitness)),
            "reached_count": float(len(reached)),
            "reached_ratio": float(len(reached)) / float(len(ranked)),
            "best_steps": float(min(agent.cursor for agent in reached)) if reached else 0.0,
            "diversity": float(mean(best_genes.distance(agent.genes) for agent in ranked)),
            "pool_size": float(getattr(self.strategy, "last_pool_size", 0)),
            "mutation_stats": float(getattr(self.strategy, "last_mutation_ratio", 0.0)),
        }
