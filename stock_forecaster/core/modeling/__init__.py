"""Modeling package exposing the forest, simulator and prediction orchestrator."""

from .estimation import estimate, estimate_from_returns
from .exceptions import (
    EmptyDatasetError,
    EmptyTestSetError,
    ForecastError,
    InsufficientHistoryError,
    InvalidFractionError,
    InvalidParameterError,
    ModelFitError,
    PredictionTimeoutError,
)
from .forest import RandomForest
from .main import StockForecasterAI, predict
from .prediction_result import PredictionResult, RunOutcome
from .simulation import MonteCarloForecast, expected_terminal_price, run_monte_carlo, simulate
from .splitting import split
from .tree import DecisionTree, gini_impurity

__all__ = [
    "DecisionTree",
    "EmptyDatasetError",
    "EmptyTestSetError",
    "ForecastError",
    "InsufficientHistoryError",
    "InvalidFractionError",
    "InvalidParameterError",
    "ModelFitError",
    "MonteCarloForecast",
    "PredictionResult",
    "PredictionTimeoutError",
    "RandomForest",
    "RunOutcome",
    "StockForecasterAI",
    "estimate",
    "estimate_from_returns",
    "expected_terminal_price",
    "gini_impurity",
    "predict",
    "run_monte_carlo",
    "simulate",
    "split",
]
