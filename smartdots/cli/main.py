"""Command-line entry points for running and plotting dot evolutions."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from smartdots.core.config_loader import SessionConfig, load_config
from smartdots.core.session import SimulationSession
from smartdots.data.logger import SimulationLogger


def _run_single(config: SessionConfig, db_path: Path, generations: int | None) -> str:
    logger = SimulationLogger(db_path)
    experiment_id: str | None = None
    try:
        session = SimulationSession(config=config, logger=logger)
        session.run(generations)
        experiment_id = session.experiment_id
    finally:
        logger.close()
    if experiment_id is None:
        raise RuntimeError("Expected experiment id when logger is configured.")
    return experiment_id


def run_cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="smartdots")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run")
    run_cmd.add_argument("--config")
    run_cmd.add_argument("--db", default="smartdots_metrics.db")
    run_cmd.add_argument("--generations", type=int)

    plot_cmd = sub.add_parser("plot")
    plot_cmd.add_argument("--experiment")
    plot_cmd.add_argument("--db", default="smartdots_metrics.db")
    plot_cmd.add_argument("--out", default="artifacts/metrics.png")

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))

    if args.command == "run":
        config = load_config(args.config) if args.config else SessionConfig()
        exp_id = _run_single(config, Path(args.db), args.generations)
        print(exp_id)
        return 0

    if args.command == "plot":
        if not Path(args.db).exists():
            parser.error(f"No experiments recorded in {args.db}.")
        experiment_id = args.experiment
        if not experiment_id:
            with SimulationLogger(args.db) as logger:
                experiment_id = logger.latest_experiment_id()
            if experiment_id is None:
                parser.error(f"No experiments recorded in {args.db}.")
        # matplotlib is only needed for plotting.
        from smartdots.visualization.plotting import plot_experiment

        path = plot_experiment(args.db, experiment_id, args.out)
        print(path)
        return 0

    return 1


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
