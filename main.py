"""Command line entry point for the stock forecaster."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from stock_forecaster.app import RunResult, StockForecasterApplication
from stock_forecaster.core import Label
from stock_forecaster.core.loader import STDIN_SENTINEL


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="A CLI stock prediction application.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        default=[STDIN_SENTINEL],
        help="Input price file(s); use '-' to read from standard input (default: %(default)s).",
    )
    parser.add_argument("--runs", type=int, help="Number of independent forest runs.")
    parser.add_argument("--trees", type=int, help="Trees per random forest.")
    parser.add_argument(
        "--feature-subset", type=int, help="Features considered at each split (1-6)."
    )
    parser.add_argument("--max-depth", type=int, help="Maximum depth of each tree.")
    parser.add_argument("--train-fraction", type=float, help="Share of history used for training.")
    parser.add_argument("--days", type=int, help="Monte Carlo horizon in days.")
    parser.add_argument("--trials", type=int, help="Number of Monte Carlo trials.")
    parser.add_argument("--seed", type=int, help="Seed for reproducible forecasts.")
    parser.add_argument(
        "--jobs", type=int, help="Worker threads for tree training and simulation (-1 for all CPUs)."
    )
    parser.add_argument("--timeout", type=float, help="Wall-clock budget in seconds for the forest runs.")
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of plain text.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    return parser.parse_args(argv)


def format_result(result: RunResult) -> str:
    if not result.ok:
        return f"{result.source}: {result.payload.get('message')}"

    payload = result.payload
    trend = "an increase" if payload["direction"] == Label.UP.value else "a decrease"
    return "\n".join(
        [
            f"{result.source}:",
            f"Monte Carlo methods predict a price of {payload['expected_price']:.4f}!",
            (
                f"The Random Forest predicts {trend} with a test accuracy of "
                f"{payload['confidence_percent']:.2f}%!"
            ),
        ]
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    overrides: dict[str, Any] = {
        "runs": args.runs,
        "n_trees": args.trees,
        "feature_subset_size": args.feature_subset,
        "max_depth": args.max_depth,
        "train_fraction": args.train_fraction,
        "simulation_days": args.days,
        "simulation_trials": args.trials,
        "random_state": args.seed,
        "n_jobs": args.jobs,
        "timeout_seconds": args.timeout,
    }

    try:
        app = StockForecasterApplication.from_environment(**overrides)
    except ValueError as exc:
        print(json.dumps({"status": "error", "message": str(exc)}), file=sys.stderr)
        return 2

    results = app.run(args.files)

    if args.json:
        output = [{"source": item.source, "status": item.status, **item.payload} for item in results]
        print(json.dumps(output, indent=2))
    else:
        for item in results:
            stream = sys.stdout if item.ok else sys.stderr
            print(format_result(item), file=stream)

    return 0 if all(item.ok for item in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
