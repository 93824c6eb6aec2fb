"""Random forest and Monte Carlo forecasting of daily stock prices."""

from stock_forecaster.app import StockForecasterApplication
from stock_forecaster.core import (
    Label,
    PredictionResult,
    PredictorConfig,
    PriceRecord,
    StockForecasterAI,
    build_config,
    load_environment,
    load_price_records,
)

__all__ = [
    "Label",
    "PredictionResult",
    "PredictorConfig",
    "PriceRecord",
    "StockForecasterAI",
    "StockForecasterApplication",
    "build_config",
    "load_environment",
    "load_price_records",
]
