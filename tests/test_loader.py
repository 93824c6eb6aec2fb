"""Tests for the CSV price loader."""

from __future__ import annotations

import io
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from stock_forecaster.core.loader import (  # noqa: E402  pylint: disable=wrong-import-position
    PriceDataError,
    describe_source,
    load_price_records,
)
from stock_forecaster.core.records import Label  # noqa: E402

HEADER = "Date,Open,High,Low,Close,Adj Close,Volume\n"
ROWS = (
    "2024-01-02,10.0,11.0,9.5,10.5,10.4,1000\n"
    "2024-01-03,10.5,11.5,10.0,11.0,10.9,1200\n"
    "2024-01-04,11.0,11.2,10.1,10.2,10.1,900\n"
)


def write_csv(tmp_path: Path, body: str, name: str = "prices.csv") -> Path:
    path = tmp_path / name
    path.write_text(body, encoding="utf-8")
    return path


def test_loads_records_in_file_order(tmp_path: Path) -> None:
    records = load_price_records(write_csv(tmp_path, HEADER + ROWS))

    assert [record.date for record in records] == ["2024-01-02", "2024-01-03", "2024-01-04"]
    first = records[0]
    assert (first.open, first.high, first.low, first.close, first.adj_close) == (
        10.0,
        11.0,
        9.5,
        10.5,
        10.4,
    )
    assert first.volume == 1000
    assert all(record.label is Label.UNLABELED for record in records)


def test_blank_lines_are_ignored(tmp_path: Path) -> None:
    body = HEADER + "\n" + ROWS.replace("\n2024-01-04", "\n\n2024-01-04") + "\n"

    records = load_price_records(write_csv(tmp_path, body))

    assert len(records) == 3


def test_non_numeric_field_reports_the_line(tmp_path: Path) -> None:
    body = HEADER + ROWS.replace("10.5,11.5", "abc,11.5")

    with pytest.raises(PriceDataError) as excinfo:
        load_price_records(write_csv(tmp_path, body))

    assert excinfo.value.line == 3
    assert "prices.csv:3" in str(excinfo.value)


def test_missing_field_is_rejected(tmp_path: Path) -> None:
    body = HEADER + "2024-01-02,10.0,11.0,9.5,10.5,10.4\n"

    with pytest.raises(PriceDataError):
        load_price_records(write_csv(tmp_path, body))


def test_fractional_or_negative_volume_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(PriceDataError):
        load_price_records(write_csv(tmp_path, HEADER + ROWS.replace(",1200", ",12.5")))
    with pytest.raises(PriceDataError):
        load_price_records(write_csv(tmp_path, HEADER + ROWS.replace(",1200", ",-3")))


def test_header_only_and_empty_files_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(PriceDataError):
        load_price_records(write_csv(tmp_path, HEADER))
    with pytest.raises(PriceDataError):
        load_price_records(write_csv(tmp_path, "", name="empty.csv"))


def test_missing_file_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_price_records(tmp_path / "absent.csv")


def test_dash_reads_standard_input(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO(HEADER + ROWS))

    records = load_price_records("-")

    assert len(records) == 3
    assert describe_source("-") == "<stdin>"


def test_open_streams_are_accepted() -> None:
    records = load_price_records(io.StringIO(HEADER + ROWS))

    assert records[-1].close == 10.2


def test_reported_line_counts_blank_lines(tmp_path: Path) -> None:
    body = HEADER + "\n\n" + "2024-01-02,bad,11.0,9.5,10.5,10.4,1000\n"

    with pytest.raises(PriceDataError) as excinfo:
        load_price_records(write_csv(tmp_path, body))

    assert excinfo.value.line == 4


def test_volume_error_line_skips_over_blank_lines(tmp_path: Path) -> None:
    body = HEADER + ROWS.replace("\n2024-01-04", "\n\n2024-01-04").replace(",900", ",9.5")

    with pytest.raises(PriceDataError) as excinfo:
        load_price_records(write_csv(tmp_path, body))

    assert excinfo.value.line == 5
