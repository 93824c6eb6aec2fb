"""Bagged ensemble of decision trees with majority voting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from sklearn.metrics import accuracy_score

from ..records import FEATURE_COUNT, PriceRecord, encoded_labels, feature_matrix
from .exceptions import EmptyTestSetError, ModelFitError
from .parallel import map_in_threads, resolve_workers
from .tree import DecisionTree

LOGGER = logging.getLogger(__name__)


def _fit_bootstrap_tree(
    features: np.ndarray,
    labels: np.ndarray,
    feature_subset_size: int,
    rng: np.random.Generator,
    max_depth: int | None,
    min_samples_split: int,
) -> DecisionTree:
    n = labels.size
    sample = rng.integers(0, n, size=n)
    return DecisionTree.fit(
        features[sample],
        labels[sample],
        feature_subset_size,
        rng,
        max_depth=max_depth,
        min_samples_split=min_samples_split,
    )


@dataclass(frozen=True)
class RandomForest:
    """Fitted collection of bootstrap-trained trees."""

    trees: tuple[DecisionTree, ...]
    feature_subset_size: int

    @classmethod
    def fit(
        cls,
        train: Sequence[PriceRecord],
        n_trees: int,
        feature_subset_size: int,
        rng: np.random.Generator,
        *,
        max_depth: int | None = None,
        min_samples_split: int = 2,
        n_jobs: int | None = None,
    ) -> "RandomForest":
        """Train ``n_trees`` trees on bootstrap resamples of ``train``.

        Each tree receives its own generator spawned from ``rng`` (tree ``i``
        gets the ``i``-th child), which drives both its bootstrap draw and its
        feature subsampling. Results therefore do not depend on ``n_jobs``.
        """

        if not train:
            raise ModelFitError("Cannot fit a random forest on an empty training set.")
        if any(not record.label.is_labeled for record in train):
            raise ModelFitError("Training records must all be labeled.")
        return cls.fit_arrays(
            feature_matrix(train),
            encoded_labels(train),
            n_trees,
            feature_subset_size,
            rng,
            max_depth=max_depth,
            min_samples_split=min_samples_split,
            n_jobs=n_jobs,
        )

    @classmethod
    def fit_arrays(
        cls,
        features: np.ndarray,
        labels: np.ndarray,
        n_trees: int,
        feature_subset_size: int,
        rng: np.random.Generator,
        *,
        max_depth: int | None = None,
        min_samples_split: int = 2,
        n_jobs: int | None = None,
    ) -> "RandomForest":
        X = np.asarray(features, dtype=float)
        y = np.asarray(labels, dtype=float)
        if int(n_trees) <= 0:
            raise ModelFitError(f"n_trees must be positive, got {n_trees}.")
        if X.ndim != 2 or X.shape[0] == 0:
            raise ModelFitError("Cannot fit a random forest on an empty training set.")
        if X.shape[1] != FEATURE_COUNT:
            raise ModelFitError(
                f"Expected {FEATURE_COUNT} features per record, got {X.shape[1]}."
            )
        if not 1 <= int(feature_subset_size) <= FEATURE_COUNT:
            raise ModelFitError(
                f"feature_subset_size must be between 1 and {FEATURE_COUNT}, got {feature_subset_size}."
            )

        tree_rngs = rng.spawn(int(n_trees))
        workers = resolve_workers(n_jobs, len(tree_rngs))
        LOGGER.debug(
            "Fitting %d trees on %d samples with %d worker(s)", len(tree_rngs), y.size, workers
        )

        def _fit(tree_rng: np.random.Generator) -> DecisionTree:
            return _fit_bootstrap_tree(
                X, y, int(feature_subset_size), tree_rng, max_depth, min_samples_split
            )

        trees = map_in_threads(_fit, tree_rngs, workers)

        return cls(trees=tuple(trees), feature_subset_size=int(feature_subset_size))

    def votes(self, features: Sequence[float] | np.ndarray) -> np.ndarray:
        return np.array([tree.predict(features) for tree in self.trees], dtype=float)

    def predict(self, features: Sequence[float] | np.ndarray) -> float:
        """Majority vote over all trees; an even split resolves to ``0.0``."""

        votes = self.votes(features)
        up_votes = int(np.count_nonzero(votes == 1.0))
        return 1.0 if up_votes > votes.size - up_votes else 0.0

    def predict_many(self, features: np.ndarray) -> np.ndarray:
        X = np.asarray(features, dtype=float)
        return np.array([self.predict(row) for row in X], dtype=float)

    def predict_record(self, record: PriceRecord) -> float:
        return self.predict(record.features())

    def evaluate(self, test: Sequence[PriceRecord]) -> float:
        """Fraction of labeled ``test`` records whose label the forest predicts correctly.

        Unlabeled records are excluded from scoring.
        """

        scored = [record for record in test if record.label.is_labeled]
        if not scored:
            raise EmptyTestSetError()
        predictions = self.predict_many(feature_matrix(scored))
        return float(accuracy_score(encoded_labels(scored), predictions))

    def __len__(self) -> int:
        return len(self.trees)


__all__ = ["RandomForest"]
