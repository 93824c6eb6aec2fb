"""Configuration utilities for the stock forecaster package."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

from dotenv import load_dotenv

from .records import FEATURE_COUNT

ENV_PREFIX = "STOCK_FORECASTER_"

DEFAULT_RUNS = 10
DEFAULT_TRAIN_FRACTION = 0.9
DEFAULT_TREES = 100
# floor(sqrt(6)) features considered per split.
DEFAULT_FEATURE_SUBSET_SIZE = 2
DEFAULT_MIN_SAMPLES_SPLIT = 2
DEFAULT_SIMULATION_DAYS = 30
DEFAULT_SIMULATION_TRIALS = 50_000


@dataclass
class PredictorConfig:
    """Runtime configuration for :class:`StockForecasterAI`."""

    runs: int = DEFAULT_RUNS
    train_fraction: float = DEFAULT_TRAIN_FRACTION
    n_trees: int = DEFAULT_TREES
    feature_subset_size: int = DEFAULT_FEATURE_SUBSET_SIZE
    max_depth: int | None = None
    min_samples_split: int = DEFAULT_MIN_SAMPLES_SPLIT
    simulation_days: int = DEFAULT_SIMULATION_DAYS
    simulation_trials: int = DEFAULT_SIMULATION_TRIALS
    random_state: int | None = None
    n_jobs: int | None = None
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        self.runs = int(self.runs)
        if self.runs <= 0:
            raise ValueError("runs must be a positive integer.")
        self.train_fraction = float(self.train_fraction)
        if not 0 < self.train_fraction < 1:
            raise ValueError("train_fraction must be between 0 and 1.")
        self.n_trees = int(self.n_trees)
        if self.n_trees <= 0:
            raise ValueError("n_trees must be a positive integer.")
        self.feature_subset_size = int(self.feature_subset_size)
        if not 1 <= self.feature_subset_size <= FEATURE_COUNT:
            raise ValueError(f"feature_subset_size must be between 1 and {FEATURE_COUNT}.")
        if self.max_depth is not None:
            self.max_depth = int(self.max_depth)
            if self.max_depth <= 0:
                raise ValueError("max_depth must be positive when set.")
        self.min_samples_split = max(1, int(self.min_samples_split))
        self.simulation_days = int(self.simulation_days)
        if self.simulation_days <= 0:
            raise ValueError("simulation_days must be a positive integer.")
        self.simulation_trials = int(self.simulation_trials)
        if self.simulation_trials <= 0:
            raise ValueError("simulation_trials must be a positive integer.")
        if self.random_state is not None:
            self.random_state = int(self.random_state)
            if self.random_state < 0:
                raise ValueError("random_state must be non-negative when set.")
        if self.n_jobs is not None:
            try:
                self.n_jobs = int(self.n_jobs)
            except (TypeError, ValueError):
                self.n_jobs = None
            if self.n_jobs == 0:
                self.n_jobs = None
        if self.timeout_seconds is not None:
            self.timeout_seconds = float(self.timeout_seconds)
            if not math.isfinite(self.timeout_seconds) or self.timeout_seconds <= 0:
                raise ValueError("timeout_seconds must be a positive number when set.")


def load_environment() -> None:
    """Load configuration from an optional ``.env`` file."""

    load_dotenv()


def _env_value(name: str, parser: Callable[[str], Any]) -> Any | None:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return None
    try:
        return parser(raw.strip())
    except (TypeError, ValueError):
        return None


def build_config(
    runs: Optional[int] = None,
    train_fraction: Optional[float] = None,
    n_trees: Optional[int] = None,
    feature_subset_size: Optional[int] = None,
    max_depth: Optional[int] = None,
    min_samples_split: Optional[int] = None,
    simulation_days: Optional[int] = None,
    simulation_trials: Optional[int] = None,
    random_state: Optional[int] = None,
    n_jobs: Optional[int] = None,
    timeout_seconds: Optional[float] = None,
) -> PredictorConfig:
    """Build a :class:`PredictorConfig` from explicit values and the environment.

    Explicit arguments win over ``STOCK_FORECASTER_*`` environment variables;
    environment values that cannot be parsed are ignored.
    """

    def _pick(value: Any | None, env_name: str, parser: Callable[[str], Any]) -> Any | None:
        if value is not None:
            return value
        return _env_value(env_name, parser)

    values = {
        "runs": _pick(runs, "RUNS", int),
        "train_fraction": _pick(train_fraction, "TRAIN_FRACTION", float),
        "n_trees": _pick(n_trees, "TREES", int),
        "feature_subset_size": _pick(feature_subset_size, "FEATURE_SUBSET", int),
        "max_depth": _pick(max_depth, "MAX_DEPTH", int),
        "min_samples_split": _pick(min_samples_split, "MIN_SAMPLES_SPLIT", int),
        "simulation_days": _pick(simulation_days, "SIMULATION_DAYS", int),
        "simulation_trials": _pick(simulation_trials, "SIMULATION_TRIALS", int),
        "random_state": _pick(random_state, "RANDOM_STATE", int),
        "n_jobs": _pick(n_jobs, "N_JOBS", int),
        "timeout_seconds": _pick(timeout_seconds, "TIMEOUT_SECONDS", float),
    }
    return PredictorConfig(**{key: value for key, value in values.items() if value is not None})


__all__ = [
    "DEFAULT_FEATURE_SUBSET_SIZE",
    "DEFAULT_RUNS",
    "DEFAULT_SIMULATION_DAYS",
    "DEFAULT_SIMULATION_TRIALS",
    "DEFAULT_TRAIN_FRACTION",
    "DEFAULT_TREES",
    "PredictorConfig",
    "build_config",
    "load_environment",
]
