"""Top-level application orchestration for the stock forecaster."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, TextIO

from stock_forecaster.core import (
    PredictionResult,
    PredictorConfig,
    PriceRecord,
    StockForecasterAI,
    build_config,
    load_environment,
    load_price_records,
)
from stock_forecaster.core.loader import PriceDataError, describe_source
from stock_forecaster.core.modeling import ForecastError

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RunResult:
    """Wrapper used by the application to provide consistent responses."""

    source: str
    status: str
    payload: dict[str, Any]
    result: PredictionResult | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class StockForecasterApplication:
    """Coordinate price loading, forecasting and per-file error recovery."""

    def __init__(self, config: PredictorConfig | None = None) -> None:
        self.config = config or PredictorConfig()
        self.forecaster = StockForecasterAI(self.config)

    @classmethod
    def from_environment(cls, **overrides: Any) -> "StockForecasterApplication":
        """Create an application instance using environment variables and overrides."""

        load_environment()
        config = build_config(**overrides)
        LOGGER.debug("Initialised configuration %s", config)
        return cls(config)

    def forecast(self, records: Iterable[PriceRecord]) -> PredictionResult:
        return self.forecaster.predict(records)

    def forecast_file(self, source: str | Path | TextIO) -> PredictionResult:
        """Load one price file (``"-"`` for stdin) and forecast it."""

        name = describe_source(source)
        records = load_price_records(source)
        LOGGER.info("%s successfully opened, %d records parsed", name, len(records))
        result = self.forecast(records)
        result.meta["source"] = name
        return result

    def run(self, sources: Iterable[str | Path | TextIO]) -> list[RunResult]:
        """Forecast every source, recording failures and moving on to the next one."""

        results: list[RunResult] = []
        for source in sources:
            name = describe_source(source)
            try:
                prediction = self.forecast_file(source)
            except (OSError, PriceDataError, ForecastError) as exc:
                LOGGER.error("%s: %s", name, exc)
                results.append(
                    RunResult(
                        source=name,
                        status="error",
                        payload={"message": str(exc), "error": type(exc).__name__},
                    )
                )
                continue
            results.append(
                RunResult(source=name, status="ok", payload=prediction.to_dict(), result=prediction)
            )
        return results


__all__ = ["RunResult", "StockForecasterApplication"]
