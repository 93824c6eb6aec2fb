"""Core analytical components for the stock forecaster application."""

from stock_forecaster.core.config import PredictorConfig, build_config, load_environment
from stock_forecaster.core.loader import PriceDataError, load_price_records
from stock_forecaster.core.modeling import (
    ForecastError,
    PredictionResult,
    RandomForest,
    StockForecasterAI,
)
from stock_forecaster.core.records import Label, PriceRecord, label_records, log_returns

__all__ = [
    "ForecastError",
    "Label",
    "PredictionResult",
    "PredictorConfig",
    "PriceDataError",
    "PriceRecord",
    "RandomForest",
    "StockForecasterAI",
    "build_config",
    "label_records",
    "load_environment",
    "load_price_records",
    "log_returns",
]
