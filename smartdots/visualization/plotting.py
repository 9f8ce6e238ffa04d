"""Plot utilities for persisted generation metrics."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from smartdots.data.logger import SimulationLogger  # noqa: E402


def plot_experiment(db_path: str | Path, experiment_id: str, output_path: str | Path) -> Path:
    """Render fitness and reach-rate curves for an experiment from SQLite logs."""
    logger = SimulationLogger(db_path)
    try:
        rows = logger.fetch_metrics(experiment_id)
    finally:
        logger.close()
    if not rows:
        raise ValueError(f"No metrics recorded for experiment '{experiment_id}'.")

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    generations = [int(row["generation_index"]) for row in rows]
    mean_fitness = [float(row["mean_fitness"]) for row in rows]
    max_fitness = [float(row["max_fitness"]) for row in rows]
    reached_ratio = [float(row["reached_ratio"]) for row in rows]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
    ax1.plot(generations, mean_fitness, label="mean_fitness")
    ax1.plot(generations, max_fitness, label="max_fitness")
    ax1.set_ylabel("fitness")
    ax1.legend()

    ax2.plot(generations, reached_ratio, label="reached_ratio", color="tab:blue")
    ax2.set_ylim(0.0, 1.0)
    ax2.set_ylabel("reached")
    ax2.set_xlabel("generation")
    ax2.legend()

    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)
    return output
