"""Random train/test partitioning of price records."""

from __future__ import annotations

import math
from typing import Sequence, TypeVar

import numpy as np

from .exceptions import EmptyDatasetError, InvalidFractionError

T = TypeVar("T")


def split_indices(
    length: int, train_fraction: float, rng: np.random.Generator
) -> tuple[np.ndarray, np.ndarray]:
    """Return disjoint train/test index arrays covering ``range(length)``."""

    if not 0 < train_fraction < 1:
        raise InvalidFractionError(train_fraction)
    if length <= 0:
        raise EmptyDatasetError()

    permutation = rng.permutation(length)
    cut = math.floor(train_fraction * length)
    return permutation[:cut], permutation[cut:]


def split(
    records: Sequence[T], train_fraction: float, rng: np.random.Generator
) -> tuple[tuple[T, ...], tuple[T, ...]]:
    """Shuffle ``records`` and partition them into train and test subsets.

    The first ``floor(train_fraction * len(records))`` shuffled records form the
    training set and the remainder the test set. Neither subset preserves the
    input order.
    """

    train_idx, test_idx = split_indices(len(records), train_fraction, rng)
    train = tuple(records[int(i)] for i in train_idx)
    test = tuple(records[int(i)] for i in test_idx)
    return train, test


__all__ = ["split", "split_indices"]
