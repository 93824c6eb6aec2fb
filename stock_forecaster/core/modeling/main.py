"""Prediction orchestration combining the random forest vote and the Monte Carlo price."""

from __future__ import annotations

import logging
import time
from typing import Iterable

import numpy as np

from ..config import PredictorConfig
from ..records import Label, PriceRecord, label_records
from .exceptions import PredictionTimeoutError
from .forest import RandomForest
from .prediction_result import PredictionResult, RunOutcome, aggregate_runs
from .simulation import run_monte_carlo
from .splitting import split

LOGGER = logging.getLogger(__name__)


class StockForecasterAI:
    """Forecast next-session direction and a projected price from one price history.

    Seed derivation: a root generator built from ``config.random_state`` spawns
    ``runs + 1`` children. Child 0 drives the Monte Carlo projection and child
    ``k`` drives classification run ``k`` (its split, then one spawned child per
    tree). Identical seeds therefore give identical results for any ``n_jobs``.
    """

    def __init__(self, config: PredictorConfig | None = None) -> None:
        self.config = config or PredictorConfig()

    def predict(
        self,
        records: Iterable[PriceRecord],
        *,
        rng: np.random.Generator | None = None,
    ) -> PredictionResult:
        """Run the full pipeline on ``records`` ordered oldest to newest.

        The newest record is the prediction target. Errors raised by the
        splitter, forest, estimator or simulator propagate to the caller.
        """

        config = self.config
        labeled = label_records(records)
        root = rng if rng is not None else np.random.default_rng(config.random_state)
        simulation_rng, *run_rngs = root.spawn(config.runs + 1)

        forecast = run_monte_carlo(
            labeled,
            rng=simulation_rng,
            days=config.simulation_days,
            trials=config.simulation_trials,
            n_jobs=config.n_jobs,
        )
        LOGGER.debug("Monte Carlo expected price %.4f", forecast.expected_price)

        history, target = labeled[:-1], labeled[-1]
        deadline = (
            time.monotonic() + config.timeout_seconds
            if config.timeout_seconds is not None
            else None
        )

        outcomes: list[RunOutcome] = []
        for run, run_rng in enumerate(run_rngs, start=1):
            outcome = self._run_classification(history, target, run, run_rng)
            outcomes.append(outcome)
            if deadline is not None and time.monotonic() > deadline:
                raise PredictionTimeoutError(config.timeout_seconds, len(outcomes), config.runs)

        direction, confidence = aggregate_runs(outcomes)
        LOGGER.info(
            "Forest verdict %s with %.2f%% mean test accuracy over %d runs",
            direction.value,
            confidence,
            len(outcomes),
        )
        return PredictionResult(
            direction=direction,
            confidence_percent=confidence,
            expected_price=forecast.expected_price,
            runs=outcomes,
            meta={
                "records": len(labeled),
                "target_date": target.date,
                "last_price": forecast.last_price,
                "drift": forecast.drift,
                "variance": forecast.variance,
                "simulation_days": forecast.days,
                "simulation_trials": forecast.trials,
            },
        )

    def _run_classification(
        self,
        history: tuple[PriceRecord, ...],
        target: PriceRecord,
        run: int,
        rng: np.random.Generator,
    ) -> RunOutcome:
        config = self.config
        train, test = split(history, config.train_fraction, rng)
        forest = RandomForest.fit(
            train,
            config.n_trees,
            config.feature_subset_size,
            rng,
            max_depth=config.max_depth,
            min_samples_split=config.min_samples_split,
            n_jobs=config.n_jobs,
        )
        outcome = RunOutcome(
            run=run,
            raw_accuracy=forest.evaluate(test),
            raw_label=Label.from_encoded(forest.predict_record(target)),
            train_size=len(train),
            test_size=len(test),
        )
        if outcome.inverted:
            LOGGER.debug(
                "Run %d scored %.3f below chance; inverting %s to %s",
                run,
                outcome.raw_accuracy,
                outcome.raw_label.value,
                outcome.label.value,
            )
        else:
            LOGGER.debug("Run %d accuracy %.3f predicts %s", run, outcome.accuracy, outcome.label.value)
        return outcome


def predict(
    records: Iterable[PriceRecord], config: PredictorConfig | None = None
) -> tuple[Label, float, float]:
    """Return ``(direction, confidence_percent, expected_price)`` for ``records``."""

    return StockForecasterAI(config).predict(records).as_tuple()


__all__ = ["StockForecasterAI", "predict"]
