"""Drift and variance estimation from historical log returns."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..records import PriceRecord, log_returns
from .exceptions import InsufficientHistoryError, InvalidParameterError


def estimate_from_returns(returns: Sequence[float] | np.ndarray) -> tuple[float, float]:
    """Return ``(mean - 0.5 * variance, variance)`` for a return series.

    The variance is the population variance (divided by the number of returns).
    """

    values = np.asarray(returns, dtype=float)
    if values.size == 0:
        raise InsufficientHistoryError(available=1)
    if not np.all(np.isfinite(values)):
        raise InvalidParameterError("returns", "non-finite", "Return series contains non-finite values.")

    mean = float(values.mean())
    variance = float(np.mean((values - mean) ** 2))
    return mean - 0.5 * variance, variance


def estimate(records: Sequence[PriceRecord]) -> tuple[float, float]:
    """Estimate Itô-corrected drift and variance of daily close log returns."""

    if len(records) < 2:
        raise InsufficientHistoryError(available=len(records))
    non_positive = [record.date for record in records if record.close <= 0]
    if non_positive:
        raise InvalidParameterError(
            "close",
            non_positive[0],
            f"Close prices must be positive to compute log returns (first offending date: {non_positive[0]}).",
        )
    return estimate_from_returns(log_returns(records))


__all__ = ["estimate", "estimate_from_returns"]
