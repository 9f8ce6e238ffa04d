"""Behavior tests for dot physics, lifecycle and fitness."""

from __future__ import annotations

import pytest

from smartdots.agents.base import AgentStatus
from smartdots.agents.dot import AgentStateError, Dot
from smartdots.agents.genes import GeneSequence
from smartdots.core.config_loader import EvolutionSettings
from smartdots.core.vector import Vector2
from smartdots.environment.arena import Arena
from smartdots.evolution.fitness import reach_fitness


def _scenario_settings(**overrides: object) -> EvolutionSettings:
    defaults = {
        "population_size": 1,
        "elite_count": 0,
        "gene_length": 400,
        "force_magnitude": 0.3,
        "max_speed": 6.0,
        "capture_radius": 8.0,
        "boundary_width": 600.0,
        "boundary_height": 600.0,
        "target_position": (300.0, 40.0),
        "start_position": (300.0, 580.0),
    }
    defaults.update(overrides)
    return EvolutionSettings(**defaults)


def _dot(gene: Vector2, length: int = 400, settings: EvolutionSettings | None = None) -> Dot:
    settings = settings or _scenario_settings()
    return Dot(
        genes=GeneSequence.constant(gene, length),
        arena=settings.arena(),
        max_speed=settings.max_speed,
        agent_id="dot_0",
    )


def _run_until_terminal(dot: Dot, limit: int = 1000) -> int:
    steps = 0
    while not dot.is_terminal and steps < limit:
        dot.step()
        steps += 1
    return steps


def test_straight_up_dot_reaches_target_before_genes_run_out() -> None:
    dot = _dot(Vector2(0.0, -0.3))

    _run_until_terminal(dot)

    assert dot.status is AgentStatus.REACHED
    assert dot.cursor < 400
    assert dot.position.distance_to(Vector2(300.0, 40.0)) < 8.0


def test_horizontal_dot_leaves_arena_and_dies() -> None:
    dot = _dot(Vector2(0.3, 0.0))

    _run_until_terminal(dot)

    assert dot.status is AgentStatus.DEAD
    assert dot.position.x > 600.0
    assert dot.cursor < 400


def test_velocity_is_clamped_to_max_speed() -> None:
    dot = _dot(Vector2(10.0, 0.0), length=3)

    dot.step()

    assert dot.velocity.magnitude() == pytest.approx(6.0)
    assert dot.velocity.y == pytest.approx(0.0)
    assert dot.position == Vector2(306.0, 580.0)


def test_dot_dies_when_genes_are_exhausted() -> None:
    dot = _dot(Vector2(0.0, 0.0), length=3)

    for _ in range(3):
        dot.step()
        assert dot.status is AgentStatus.ALIVE

    dot.step()

    assert dot.status is AgentStatus.DEAD
    assert dot.cursor == 3
    assert dot.position == Vector2(300.0, 580.0)


def test_terminal_states_are_absorbing() -> None:
    dot = _dot(Vector2(0.3, 0.0))
    _run_until_terminal(dot)
    frozen = (dot.position, dot.velocity, dot.cursor, dot.status)

    for _ in range(5):
        dot.step()

    assert (dot.position, dot.velocity, dot.cursor, dot.status) == frozen


def test_boundary_check_wins_over_capture() -> None:
    arena = Arena(
        width=600.0,
        height=600.0,
        target=Vector2(0.0, 300.0),
        start=Vector2(1.0, 300.0),
        capture_radius=8.0,
    )
    dot = Dot(genes=GeneSequence.constant(Vector2(-2.0, 0.0), 10), arena=arena, max_speed=6.0)

    dot.step()

    assert dot.position.x < 0.0
    assert arena.is_captured(dot.position)
    assert dot.status is AgentStatus.DEAD


def test_spawn_resets_lifecycle_state() -> None:
    dot = _dot(Vector2(0.3, 0.0))
    _run_until_terminal(dot)
    dot.evaluate_fitness()

    dot.spawn(Vector2(10.0, 20.0))

    assert dot.position == Vector2(10.0, 20.0)
    assert dot.velocity == Vector2.zero()
    assert dot.acceleration == Vector2.zero()
    assert dot.cursor == 0
    assert dot.status is AgentStatus.ALIVE
    assert dot.fitness == 0.0


def test_evaluate_fitness_requires_terminal_state() -> None:
    dot = _dot(Vector2(0.0, -0.3))
    dot.step()

    with pytest.raises(AgentStateError, match="still alive"):
        dot.evaluate_fitness()
    assert dot.fitness == 0.0


def test_reached_dot_outscores_dead_dot() -> None:
    reached = _dot(Vector2(0.0, -0.3))
    dead = _dot(Vector2(0.3, 0.0))
    _run_until_terminal(reached)
    _run_until_terminal(dead)

    reached_fitness = reached.evaluate_fitness()
    dead_fitness = dead.evaluate_fitness()

    assert dead_fitness > 0.0
    assert reached_fitness > 1.0 > dead_fitness
    expected = reach_fitness(
        distance=reached.position.distance_to(Vector2(300.0, 40.0)),
        reached=True,
        steps_used=reached.cursor,
        gene_length=400,
    )
    assert reached_fitness == pytest.approx(expected)


def test_clone_with_sequence_spawns_fresh_dot_with_given_genes() -> None:
    parent = _dot(Vector2(0.3, 0.0))
    _run_until_terminal(parent)
    genes = GeneSequence.constant(Vector2(0.0, 0.3), 5)

    child = parent.clone_with_sequence(genes, agent_id="dot_9")

    assert child.get_genome() is genes
    assert child.status is AgentStatus.ALIVE
    assert child.position == parent.arena.start
    assert child.cursor == 0
    assert child.agent_id == "dot_9"


def test_to_dict_reports_status_and_position() -> None:
    dot = _dot(Vector2(0.0, -0.3))
    dot.step()

    payload = dot.to_dict()

    assert payload["id"] == "dot_0"
    assert payload["status"] == "alive"
    assert payload["cursor"] == 1
    assert payload["position"] == pytest.approx([300.0, 579.7])
