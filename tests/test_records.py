"""Tests for price records, labeling and return derivation."""

from __future__ import annotations

import math
from pathlib import Path
import sys

import numpy as np
import pytest
from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from stock_forecaster.core.records import (  # noqa: E402  pylint: disable=wrong-import-position
    FEATURE_COUNT,
    UNLABELED_SENTINEL,
    Label,
    PriceRecord,
    encoded_labels,
    feature_matrix,
    label_records,
    log_returns,
)


def make_record(close: float, *, day: int = 1, volume: int = 1_000) -> PriceRecord:
    return PriceRecord(
        date=f"2024-01-{day:02d}",
        open=close - 1.0,
        high=close + 2.0,
        low=close - 2.0,
        close=close,
        adj_close=close - 0.5,
        volume=volume,
    )


def test_feature_vector_order_and_dimension() -> None:
    record = make_record(10.0, volume=42)

    assert record.features() == (9.0, 12.0, 8.0, 9.5, 10.0, 42.0)
    assert len(record.features()) == FEATURE_COUNT
    assert isinstance(record.features()[-1], float)


def test_label_records_compares_each_close_with_the_next() -> None:
    records = [make_record(close, day=i + 1) for i, close in enumerate([10.0, 11.0, 11.0, 9.0])]

    labeled = label_records(records)

    assert [record.label for record in labeled] == [
        Label.UP,
        Label.UP,
        Label.DOWN,
        Label.UNLABELED,
    ]
    # the input records are left untouched
    assert all(record.label is Label.UNLABELED for record in records)


def test_single_record_stays_unlabeled() -> None:
    labeled = label_records([make_record(5.0)])

    assert len(labeled) == 1
    assert labeled[0].label is Label.UNLABELED
    assert label_records([]) == ()


def test_label_encoding_keeps_sentinel_out_of_the_class_values() -> None:
    assert Label.UP.encoded == 1.0
    assert Label.DOWN.encoded == 0.0
    assert Label.UNLABELED.encoded == UNLABELED_SENTINEL == -1.0
    assert Label.from_encoded(0.0) is Label.DOWN
    assert Label.UP.inverted() is Label.DOWN
    assert Label.UNLABELED.inverted() is Label.UNLABELED
    with pytest.raises(ValueError):
        Label.from_encoded(0.5)


def test_log_returns_skip_the_first_record() -> None:
    records = [make_record(close) for close in (100.0, 110.0, 99.0)]

    returns = log_returns(records)

    np.testing.assert_allclose(returns, [math.log(1.1), math.log(0.9)])
    assert log_returns(records[:1]).size == 0


def test_matrix_helpers_follow_record_order() -> None:
    labeled = label_records([make_record(close) for close in (1.0, 2.0, 1.5)])

    matrix = feature_matrix(labeled)

    assert matrix.shape == (3, FEATURE_COUNT)
    np.testing.assert_array_equal(matrix[:, 4], [1.0, 2.0, 1.5])
    np.testing.assert_array_equal(encoded_labels(labeled), [1.0, 0.0, -1.0])
    assert feature_matrix([]).shape == (0, FEATURE_COUNT)


def test_negative_volume_is_rejected() -> None:
    with pytest.raises(ValidationError):
        make_record(10.0, volume=-1)


def test_non_finite_prices_are_rejected() -> None:
    with pytest.raises(ValidationError):
        make_record(float("nan"))


def test_adj_close_alias_is_accepted() -> None:
    record = PriceRecord.model_validate(
        {
            "date": "2024-02-01",
            "open": 1.0,
            "high": 1.0,
            "low": 1.0,
            "close": 1.0,
            "adjClose": 0.9,
            "volume": 3,
        }
    )

    assert record.adj_close == 0.9
