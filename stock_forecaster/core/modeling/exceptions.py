"""Custom exceptions for the modeling package."""

from __future__ import annotations


class ForecastError(ValueError):
    """Base class for structurally invalid forecasting inputs."""


class InvalidFractionError(ForecastError):
    """Raised when a train fraction falls outside the open interval (0, 1)."""

    def __init__(self, fraction: float, message: str | None = None) -> None:
        self.fraction = fraction
        super().__init__(
            message or f"train_fraction must be strictly between 0 and 1, got {fraction!r}."
        )


class EmptyDatasetError(ForecastError):
    """Raised when an operation receives no records at all."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Cannot split an empty dataset.")


class EmptyTestSetError(ForecastError):
    """Raised when accuracy is requested for an empty test set."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Cannot evaluate a forest on an empty test set.")


class InsufficientHistoryError(ForecastError):
    """Raised when there are not enough records to derive a return series."""

    def __init__(self, available: int, required: int = 2, message: str | None = None) -> None:
        self.available = int(available)
        self.required = int(required)
        super().__init__(
            message
            or f"At least {self.required} records are required, got {self.available}."
        )


class InvalidParameterError(ForecastError):
    """Raised when simulation parameters are out of range."""

    def __init__(self, parameter: str, value: object, message: str | None = None) -> None:
        self.parameter = parameter
        self.value = value
        super().__init__(message or f"Invalid value for {parameter}: {value!r}.")


class ModelFitError(ForecastError):
    """Raised when a tree or forest cannot be trained on the supplied data."""


class PredictionTimeoutError(ForecastError, TimeoutError):
    """Raised when the classification loop exceeds its wall-clock budget."""

    def __init__(self, timeout: float, completed_runs: int, total_runs: int) -> None:
        self.timeout = float(timeout)
        self.completed_runs = int(completed_runs)
        self.total_runs = int(total_runs)
        super().__init__(
            f"Prediction exceeded {self.timeout:g}s after {self.completed_runs} of "
            f"{self.total_runs} runs."
        )


__all__ = [
    "EmptyDatasetError",
    "EmptyTestSetError",
    "ForecastError",
    "InsufficientHistoryError",
    "InvalidFractionError",
    "InvalidParameterError",
    "ModelFitError",
    "PredictionTimeoutError",
]
