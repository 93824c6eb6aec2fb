"""Load daily OHLCV price files into :class:`PriceRecord` sequences."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

import pandas as pd
from pydantic import ValidationError

from .records import Dataset, PriceRecord

LOGGER = logging.getLogger(__name__)

STDIN_SENTINEL = "-"
PRICE_COLUMNS: tuple[str, ...] = ("date", "open", "high", "low", "close", "adj_close", "volume")
_NUMERIC_COLUMNS = PRICE_COLUMNS[1:]


class PriceDataError(ValueError):
    """Raised when a price file cannot be turned into price records."""

    def __init__(self, source: str, message: str, line: int | None = None) -> None:
        self.source = source
        self.line = line
        location = f"{source}:{line}" if line is not None else source
        super().__init__(f"{location}: {message}")


def describe_source(source: str | Path | TextIO) -> str:
    if isinstance(source, (str, Path)):
        return "<stdin>" if str(source) == STDIN_SENTINEL else str(source)
    return str(getattr(source, "name", "<stream>"))


def load_price_records(source: str | Path | TextIO) -> Dataset:
    """Parse a header-skipped CSV of ``date,open,high,low,close,adj_close,volume`` rows.

    ``source`` may be a path, an open text stream, or ``"-"`` for standard input.
    Blank lines are ignored. Any row with a missing or non-numeric field raises
    :class:`PriceDataError` naming the offending line; records come back
    unlabeled and in file order.
    """

    name = describe_source(source)
    if isinstance(source, (str, Path)) and str(source) == STDIN_SENTINEL:
        handle: str | Path | TextIO = sys.stdin
    elif isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(path)
        handle = path
    else:
        handle = source

    try:
        frame = pd.read_csv(
            handle,
            dtype=str,
            index_col=False,
            skipinitialspace=True,
            skip_blank_lines=False,
        )
    except UnicodeDecodeError as exc:
        raise PriceDataError(name, "file is not valid UTF-8 text") from exc
    except pd.errors.EmptyDataError as exc:
        raise PriceDataError(name, "file is empty") from exc
    except pd.errors.ParserError as exc:
        raise PriceDataError(name, f"malformed CSV: {exc}") from exc

    if frame.shape[1] < len(PRICE_COLUMNS):
        raise PriceDataError(
            name,
            f"expected {len(PRICE_COLUMNS)} columns ({', '.join(PRICE_COLUMNS)}), found {frame.shape[1]}",
        )
    frame = frame.iloc[:, : len(PRICE_COLUMNS)]
    frame.columns = list(PRICE_COLUMNS)
    # Blank lines read as all-NaN rows; dropping them keeps the index aligned
    # with physical lines (index 0 is line 2).
    frame = frame.loc[~frame.isna().all(axis=1)]
    if frame.empty:
        raise PriceDataError(name, "no price rows found after the header")

    numeric = frame.loc[:, list(_NUMERIC_COLUMNS)].apply(pd.to_numeric, errors="coerce")
    invalid = numeric.isna().any(axis=1) | frame["date"].isna()
    if invalid.any():
        raise PriceDataError(name, "missing or non-numeric field", line=int(invalid.idxmax()) + 2)

    records: list[PriceRecord] = []
    for index, date, row in zip(frame.index, frame["date"], numeric.itertuples(index=False)):
        line = int(index) + 2
        volume = float(row.volume)
        if not volume.is_integer():
            raise PriceDataError(name, f"volume must be a whole number, got {volume}", line=line)
        try:
            records.append(
                PriceRecord(
                    date=str(date).strip(),
                    open=float(row.open),
                    high=float(row.high),
                    low=float(row.low),
                    close=float(row.close),
                    adj_close=float(row.adj_close),
                    volume=int(volume),
                )
            )
        except ValidationError as exc:
            raise PriceDataError(name, str(exc.errors()[0]["msg"]), line=line) from exc

    LOGGER.debug("Loaded %d price records from %s", len(records), name)
    return tuple(records)


__all__ = [
    "PRICE_COLUMNS",
    "PriceDataError",
    "STDIN_SENTINEL",
    "describe_source",
    "load_price_records",
]
