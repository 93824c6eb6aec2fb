"""Simulation helpers for Monte Carlo-based price projection."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..config import DEFAULT_SIMULATION_DAYS, DEFAULT_SIMULATION_TRIALS
from ..records import PriceRecord
from .estimation import estimate
from .exceptions import InvalidParameterError
from .parallel import map_in_threads

LOGGER = logging.getLogger(__name__)

# Trials are generated in fixed-size chunks, each with its own spawned
# generator, so results do not depend on the number of worker threads.
SIMULATION_CHUNK_SIZE = 10_000


@dataclass(frozen=True)
class MonteCarloForecast:
    """Outcome of the geometric Brownian motion price projection."""

    expected_price: float
    last_price: float
    drift: float
    variance: float
    days: int
    trials: int


def _simulate_gbm_paths(
    *,
    last_price: float,
    drift: float,
    volatility: float,
    days: int,
    trials: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Roll out ``trials`` price paths of ``days`` rows, starting at ``last_price``.

    Every row after the first multiplies the previous row by
    ``exp(drift + volatility * Z)`` with an independent standard normal ``Z``
    per cell.
    """

    noise = rng.standard_normal((days - 1, trials))
    factors = np.exp(drift + volatility * noise)
    steps = np.concatenate([np.full((1, trials), last_price, dtype=float), factors], axis=0)
    return np.cumprod(steps, axis=0)


def simulate(
    *,
    last_price: float,
    drift: float,
    variance: float,
    rng: np.random.Generator,
    days: int = DEFAULT_SIMULATION_DAYS,
    trials: int = DEFAULT_SIMULATION_TRIALS,
    n_jobs: int | None = None,
    chunk_size: int = SIMULATION_CHUNK_SIZE,
) -> np.ndarray:
    """Simulate a ``days x trials`` matrix of log-normal price paths.

    Row 0 holds ``last_price`` in every column. Trials are split into chunks of
    ``chunk_size`` columns; chunk ``i`` draws from the ``i``-th generator
    spawned from ``rng`` and chunks may run on up to ``n_jobs`` threads.
    """

    if int(days) <= 0:
        raise InvalidParameterError("days", days, "days must be a positive integer.")
    if int(trials) <= 0:
        raise InvalidParameterError("trials", trials, "trials must be a positive integer.")
    if not math.isfinite(variance) or variance < 0:
        raise InvalidParameterError("variance", variance, "variance must be a non-negative finite number.")
    if not math.isfinite(drift):
        raise InvalidParameterError("drift", drift, "drift must be a finite number.")
    if not math.isfinite(last_price) or last_price <= 0:
        raise InvalidParameterError("last_price", last_price, "last_price must be a positive finite number.")
    if int(chunk_size) <= 0:
        raise InvalidParameterError("chunk_size", chunk_size, "chunk_size must be a positive integer.")

    days = int(days)
    trials = int(trials)
    volatility = math.sqrt(variance)
    chunk_sizes = [
        min(int(chunk_size), trials - start) for start in range(0, trials, int(chunk_size))
    ]
    chunk_rngs = rng.spawn(len(chunk_sizes))

    def _run(chunk: tuple[int, np.random.Generator]) -> np.ndarray:
        size, chunk_rng = chunk
        return _simulate_gbm_paths(
            last_price=float(last_price),
            drift=float(drift),
            volatility=volatility,
            days=days,
            trials=size,
            rng=chunk_rng,
        )

    blocks = map_in_threads(_run, list(zip(chunk_sizes, chunk_rngs)), n_jobs)
    return np.concatenate(blocks, axis=1)


def expected_terminal_price(paths: np.ndarray) -> float:
    """Arithmetic mean of the final simulated day across all trials."""

    matrix = np.asarray(paths, dtype=float)
    if matrix.ndim != 2 or matrix.size == 0:
        raise InvalidParameterError("paths", matrix.shape, "paths must be a non-empty 2-D array.")
    return float(matrix[-1].mean())


def run_monte_carlo(
    records: Sequence[PriceRecord],
    *,
    rng: np.random.Generator,
    days: int = DEFAULT_SIMULATION_DAYS,
    trials: int = DEFAULT_SIMULATION_TRIALS,
    n_jobs: int | None = None,
) -> MonteCarloForecast:
    """Estimate drift/variance from ``records`` and project the expected price."""

    drift, variance = estimate(records)
    last_price = float(records[-1].close)
    LOGGER.debug(
        "Simulating %d trials over %d days (last=%.4f, drift=%.6f, variance=%.6f)",
        trials,
        days,
        last_price,
        drift,
        variance,
    )
    paths = simulate(
        last_price=last_price,
        drift=drift,
        variance=variance,
        rng=rng,
        days=days,
        trials=trials,
        n_jobs=n_jobs,
    )
    return MonteCarloForecast(
        expected_price=expected_terminal_price(paths),
        last_price=last_price,
        drift=drift,
        variance=variance,
        days=int(days),
        trials=int(trials),
    )


__all__ = [
    "DEFAULT_SIMULATION_DAYS",
    "DEFAULT_SIMULATION_TRIALS",
    "MonteCarloForecast",
    "SIMULATION_CHUNK_SIZE",
    "expected_terminal_price",
    "run_monte_carlo",
    "simulate",
]
