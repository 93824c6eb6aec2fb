"""Daily price records and the label/feature/return derivations built on them."""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Iterable, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

FEATURE_NAMES: tuple[str, ...] = ("open", "high", "low", "adj_close", "close", "volume")
FEATURE_COUNT = len(FEATURE_NAMES)

UNLABELED_SENTINEL = -1.0


class Label(StrEnum):
    """Next-day movement of a record relative to the following session."""

    UP = "up"
    DOWN = "down"
    UNLABELED = "unlabeled"

    @property
    def encoded(self) -> float:
        """Numeric class used by the learners (``UNLABELED`` maps to the sentinel)."""

        if self is Label.UP:
            return 1.0
        if self is Label.DOWN:
            return 0.0
        return UNLABELED_SENTINEL

    @property
    def is_labeled(self) -> bool:
        return self is not Label.UNLABELED

    @classmethod
    def from_encoded(cls, value: float) -> "Label":
        if value == 1.0:
            return cls.UP
        if value == 0.0:
            return cls.DOWN
        if value == UNLABELED_SENTINEL:
            return cls.UNLABELED
        raise ValueError(f"Unknown encoded label: {value!r}")

    def inverted(self) -> "Label":
        if self is Label.UP:
            return Label.DOWN
        if self is Label.DOWN:
            return Label.UP
        return self


class PriceRecord(BaseModel):
    """One OHLCV session as consumed by the forecasting core."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: str
    open: float
    high: float
    low: float
    close: float
    adj_close: float = Field(alias="adjClose")
    volume: int = Field(ge=0)
    label: Label = Label.UNLABELED

    @field_validator("open", "high", "low", "close", "adj_close")
    @classmethod
    def _require_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("price fields must be finite numbers")
        return value

    def features(self) -> tuple[float, ...]:
        """Return the fixed six-element feature vector."""

        return (
            self.open,
            self.high,
            self.low,
            self.adj_close,
            self.close,
            float(self.volume),
        )

    def with_label(self, label: Label) -> "PriceRecord":
        return self.model_copy(update={"label": label})

    def __str__(self) -> str:
        return (
            f"{self.date}: Open - {self.open}, High - {self.high}, Low - {self.low}, "
            f"Close - {self.close}, Volume - {self.volume}"
        )


Dataset = tuple[PriceRecord, ...]


def label_records(records: Iterable[PriceRecord]) -> Dataset:
    """Label every record against its successor; the last record stays unlabeled.

    A record is ``UP`` when its close is less than or equal to the next close and
    ``DOWN`` otherwise.
    """

    ordered = tuple(records)
    labeled: list[PriceRecord] = []
    for current, following in zip(ordered, ordered[1:]):
        label = Label.UP if current.close <= following.close else Label.DOWN
        labeled.append(current.with_label(label))
    if ordered:
        labeled.append(ordered[-1].with_label(Label.UNLABELED))
    return tuple(labeled)


def log_returns(records: Sequence[PriceRecord]) -> np.ndarray:
    """Daily log returns of the close, one per record after the first."""

    if len(records) < 2:
        return np.empty(0, dtype=float)
    closes = np.array([record.close for record in records], dtype=float)
    return np.log(closes[1:] / closes[:-1])


def feature_matrix(records: Sequence[PriceRecord]) -> np.ndarray:
    if not records:
        return np.empty((0, FEATURE_COUNT), dtype=float)
    return np.array([record.features() for record in records], dtype=float)


def encoded_labels(records: Sequence[PriceRecord]) -> np.ndarray:
    return np.array([record.label.encoded for record in records], dtype=float)


__all__ = [
    "Dataset",
    "FEATURE_COUNT",
    "FEATURE_NAMES",
    "Label",
    "PriceRecord",
    "UNLABELED_SENTINEL",
    "encoded_labels",
    "feature_matrix",
    "label_records",
    "log_returns",
]
