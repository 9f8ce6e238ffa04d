"""Driver-owned simulation session: config, RNG, population and metrics."""

from __future__ import annotations

import logging
from typing import Any

from smartdots.core.config_loader import SessionConfig
from smartdots.core.deterministic_rng import DeterministicRNG
from smartdots.core.population import Population
from smartdots.core.render_state import PopulationSnapshot
from smartdots.data.logger import SimulationLogger

LOGGER = logging.getLogger(__name__)

SESSION_VERSION = "0.1.0"


class SimulationSessionError(RuntimeError):
    """Raised when a session phase fails."""


class SimulationSession:
    """Explicit replacement for process-wide simulation state.

    A driver (render loop, CLI, test) owns one session and advances it with
    ``tick``. The session never sleeps, renders or schedules; pacing belongs
    to the caller, which may simply stop calling ``tick`` at any time.
    """

    def __init__(self, config: SessionConfig | None = None, logger: SimulationLogger | None = None) -> None:
        self.config = config or SessionConfig()
        self.rng = DeterministicRNG(self.config.run.seed)
        self.population = Population(self.config.evolution, rng=self.rng.stream("population"))

        self.logger = logger
        self.experiment_id: str | None = None
        if self.logger is not None:
            self.experiment_id = self.logger.start_experiment(
                config=self.config.to_dict(),
                seed=self.config.run.seed,
                experiment_name=self.config.logging.experiment_name,
                metadata={"session_version": SESSION_VERSION},
            )

        self.metrics_history: list[dict[str, float]] = []

    @property
    def generation_count(self) -> int:
        return self.population.generation_count

    @property
    def step_limit(self) -> int:
        """Ticks allowed per generation before the session gives up.

        Every dot stops after at most ``gene_length + 1`` steps, so the
        default limit is always enough.
        """
        configured = self.config.run.max_steps_per_generation
        if configured is not None:
            return int(configured)
        return int(self.config.evolution.gene_length) + 1

    def tick(self) -> bool:
        """Advance one step; reproduce when every dot has finished.

        Returns:
            bool: True when this tick completed a generation.
        """
        self.population.step()
        if not self.population.is_generation_complete():
            return False

        self.population.reproduce()
        self.on_generation_end(dict(self.population.last_generation_metrics or {}))
        return True

    def run_generation(self, max_steps: int | None = None) -> dict[str, float]:
        """Tick until the current generation completes and return its metrics."""
        limit = int(max_steps) if max_steps is not None else self.step_limit
        generation = self.population.generation_count
        for _ in range(limit):
            if self.tick():
                return self.metrics_history[-1]
        raise SimulationSessionError(
            f"Generation {generation} did not complete within {limit} steps "
            f"({self.population.alive_count()} dot(s) still alive)."
        )

    def run(self, generations: int | None = None) -> list[dict[str, float]]:
        """Run a fixed number of generations and return their metrics."""
        total = self.config.run.generations if generations is None else int(generations)
        if total < 0:
            raise ValueError("generations must be non-negative")

        start = len(self.metrics_history)
        for _ in range(total):
            self.run_generation()
        return self.metrics_history[start:]

    def on_generation_end(self, metrics: dict[str, float]) -> None:
        """Record metrics for a completed generation and persist them if configured."""
        self.metrics_history.append(metrics)
        generation_index = int(metrics.get("generation", len(self.metrics_history)))

        if generation_index % self.config.logging.log_interval == 0:
            LOGGER.info(
                "generation=%d max_fitness=%.4f mean_fitness=%.4f reached=%d",
                generation_index,
                metrics.get("max_fitness", 0.0),
                metrics.get("mean_fitness", 0.0),
                int(metrics.get("reached_count", 0.0)),
            )

        if self.logger is None or self.experiment_id is None:
            return
        self._safe_call(
            "logger.log_metrics",
            self.logger.log_metrics,
            experiment_id=self.experiment_id,
            generation_index=generation_index,
            metrics=metrics,
        )

    def snapshot(self) -> PopulationSnapshot:
        return self.population.snapshot()

    @staticmethod
    def _safe_call(label: str, fn: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            raise SimulationSessionError(f"{label} failed: {exc}") from exc
