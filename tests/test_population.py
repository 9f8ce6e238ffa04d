"""Tests for population stepping, reproduction and determinism."""

from __future__ import annotations

import random

import pytest

from smartdots.agents.base import AgentStatus
from smartdots.core.config_loader import EvolutionSettings
from smartdots.core.population import GenerationIncompleteError, Population


def _settings(**overrides: object) -> EvolutionSettings:
    defaults = {
        "population_size": 10,
        "gene_length": 60,
        "mutation_rate": 0.05,
        "elite_count": 4,
    }
    defaults.update(overrides)
    return EvolutionSettings(**defaults)


def _finish_generation(population: Population) -> None:
    while not population.is_generation_complete():
        population.step()


def test_new_population_spawns_live_dots_at_start() -> None:
    settings = _settings()
    population = Population(settings, rng=random.Random(1))

    assert len(population) == 10
    assert population.generation_count == 1
    assert all(agent.status is AgentStatus.ALIVE for agent in population.agents)
    assert all(agent.position.as_tuple() == settings.start_position for agent in population.agents)
    assert all(len(agent.genes) == 60 for agent in population.agents)


def test_generation_completes_within_gene_length_plus_one_steps() -> None:
    population = Population(_settings(), rng=random.Random(2))

    for _ in range(61):
        population.step()

    assert population.is_generation_complete()
    assert population.alive_count() == 0
    assert population.step_index == 61


def test_reproduce_before_completion_is_rejected_without_side_effects() -> None:
    population = Population(_settings(), rng=random.Random(3))
    population.step()
    agents_before = population.agents

    with pytest.raises(GenerationIncompleteError):
        population.reproduce()

    assert population.generation_count == 1
    assert population.agents == agents_before
    assert population.last_generation_metrics is None


def test_reproduce_keeps_size_and_carries_top_genomes_unchanged() -> None:
    population = Population(_settings(), rng=random.Random(4))
    _finish_generation(population)
    fitness = population.evaluate()
    ranked = sorted(zip(fitness, population.agents), key=lambda row: row[0], reverse=True)
    elite_genes = [agent.genes.to_list() for _, agent in ranked[:4]]

    population.reproduce()

    assert len(population) == 10
    assert population.generation_count == 2
    assert population.step_index == 0
    new_genes = [agent.genes.to_list() for agent in population.agents]
    assert new_genes[:4] == elite_genes
    assert all(agent.status is AgentStatus.ALIVE for agent in population.agents)
    assert all(agent.fitness == 0.0 for agent in population.agents)


def test_reproduce_records_generation_metrics() -> None:
    population = Population(_settings(), rng=random.Random(5))
    _finish_generation(population)

    population.reproduce()

    metrics = population.last_generation_metrics
    assert metrics is not None
    assert metrics["generation"] == 1.0
    assert metrics["max_fitness"] >= metrics["mean_fitness"] >= metrics["min_fitness"] > 0.0
    assert 0.0 <= metrics["reached_ratio"] <= 1.0
    assert metrics["diversity"] > 0.0
    assert metrics["pool_size"] >= 100.0


def test_generation_counter_increments_once_per_cycle() -> None:
    population = Population(_settings(), rng=random.Random(6))

    for expected in (2, 3, 4):
        _finish_generation(population)
        population.reproduce()
        assert population.generation_count == expected
        assert len(population) == 10


def test_equal_seeds_replay_identical_generations() -> None:
    def _run(seed: int) -> tuple[list[dict[str, float]], list[list[list[float]]]]:
        population = Population(_settings(), rng=random.Random(seed))
        history = []
        for _ in range(3):
            _finish_generation(population)
            population.reproduce()
            history.append(dict(population.last_generation_metrics or {}))
        return history, [agent.genes.to_list() for agent in population.agents]

    assert _run(21) == _run(21)
    assert _run(21) != _run(22)


def test_snapshot_reports_positions_and_statuses() -> None:
    population = Population(_settings(population_size=3, elite_count=1), rng=random.Random(7))
    population.step()

    snapshot = population.snapshot()

    assert snapshot.generation_count == 1
    assert snapshot.step_index == 1
    assert [agent.id for agent in snapshot.agents] == ["dot_0", "dot_1", "dot_2"]
    assert snapshot.count_status("alive") == population.alive_count()
    assert snapshot.environment.bounds == (600.0, 600.0)
    assert snapshot.environment.target == (300.0, 40.0)
    for state, agent in zip(snapshot.agents, population.agents):
        assert state.position == agent.position.as_tuple()
        assert state.fitness is None


def test_equal_fitness_keeps_population_order_for_elites() -> None:
    population = Population(_settings(population_size=6, elite_count=3), rng=random.Random(8))
    for agent in population.agents:
        agent.status = AgentStatus.DEAD
    original_genes = [agent.genes.to_list() for agent in population.agents]
    fitness = population.evaluate()
    assert len(set(fitness)) == 1

    population.reproduce()

    new_genes = [agent.genes.to_list() for agent in population.agents]
    assert new_genes[:3] == original_genes[:3]


def test_offspring_are_fresh_dots_sharing_arena_and_physics() -> None:
    settings = _settings(max_speed=4.5)
    population = Population(settings, rng=random.Random(9))
    arena = population.arena
    _finish_generation(population)

    population.reproduce()

    assert [agent.agent_id for agent in population.agents] == [f"dot_{index}" for index in range(10)]
    for agent in population.agents:
        assert agent.arena is arena
        assert agent.max_speed == 4.5
        assert agent.status is AgentStatus.ALIVE
        assert agent.cursor == 0
        assert agent.position == arena.start
