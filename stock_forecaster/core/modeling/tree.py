"""CART-style binary classification tree grown with Gini impurity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .exceptions import ModelFitError

# Impurity decreases smaller than this are treated as no improvement.
_MIN_IMPURITY_DECREASE = 1e-12


def gini_impurity(labels: Sequence[float] | np.ndarray) -> float:
    """Return ``1 - sum(p_c ** 2)`` over the class proportions of ``labels``."""

    values = np.asarray(labels, dtype=float)
    if values.size == 0:
        return 0.0
    _, counts = np.unique(values, return_counts=True)
    proportions = counts / values.size
    return float(1.0 - np.sum(proportions**2))


def majority_label(labels: np.ndarray) -> float:
    """Most frequent binary class, preferring ``0.0`` on ties."""

    positives = int(np.count_nonzero(labels == 1.0))
    negatives = int(labels.size - positives)
    return 1.0 if positives > negatives else 0.0


@dataclass(frozen=True)
class TreeNode:
    """Internal split (``feature``/``threshold``) or leaf (``label``)."""

    feature: int | None = None
    threshold: float | None = None
    left: "TreeNode | None" = None
    right: "TreeNode | None" = None
    label: float | None = None

    @property
    def is_leaf(self) -> bool:
        return self.label is not None


def _best_split(
    features: np.ndarray, labels: np.ndarray, candidates: Iterable[int]
) -> tuple[float, int | None, float | None]:
    """Scan candidate features and thresholds for the lowest weighted Gini impurity.

    Features are visited in ``candidates`` order and thresholds in ascending
    order; the first pair reaching the minimum wins. Thresholds that would
    leave one side empty are skipped.
    """

    n = labels.size
    best_impurity = np.inf
    best_feature: int | None = None
    best_threshold: float | None = None

    for feature in candidates:
        column = features[:, feature]
        order = np.argsort(column, kind="stable")
        sorted_values = column[order]
        sorted_labels = labels[order]

        boundaries = np.flatnonzero(sorted_values[:-1] != sorted_values[1:])
        if boundaries.size == 0:
            continue

        positives = np.cumsum(sorted_labels)
        n_left = (boundaries + 1).astype(float)
        n_right = n - n_left
        left_pos = positives[boundaries]
        right_pos = positives[-1] - left_pos

        p_left = left_pos / n_left
        p_right = right_pos / n_right
        gini_left = 2.0 * p_left * (1.0 - p_left)
        gini_right = 2.0 * p_right * (1.0 - p_right)
        impurity = (n_left / n) * gini_left + (n_right / n) * gini_right

        idx = int(np.argmin(impurity))
        if impurity[idx] < best_impurity:
            best_impurity = float(impurity[idx])
            best_feature = int(feature)
            best_threshold = float(sorted_values[boundaries[idx]])

    return best_impurity, best_feature, best_threshold


@dataclass(frozen=True)
class DecisionTree:
    """An immutable fitted classification tree."""

    root: TreeNode
    n_features: int
    feature_subset_size: int

    @classmethod
    def fit(
        cls,
        features: np.ndarray | Sequence[Sequence[float]],
        labels: np.ndarray | Sequence[float],
        feature_subset_size: int,
        rng: np.random.Generator,
        *,
        max_depth: int | None = None,
        min_samples_split: int = 2,
    ) -> "DecisionTree":
        """Grow a tree on ``features``/``labels`` (classes ``0.0`` and ``1.0``).

        At every node ``feature_subset_size`` distinct features are drawn from
        ``rng`` without replacement, and every distinct value of each drawn
        feature is tried as a ``<=`` threshold. A node becomes a leaf when it is
        pure, holds fewer than ``min_samples_split`` samples, sits at
        ``max_depth``, or has no split that strictly lowers its impurity.
        """

        X = np.asarray(features, dtype=float)
        y = np.asarray(labels, dtype=float)
        if X.ndim != 2 or X.shape[0] == 0:
            raise ModelFitError("Decision tree requires a non-empty 2-D feature matrix.")
        if y.shape != (X.shape[0],):
            raise ModelFitError(
                f"Label count {y.size} does not match sample count {X.shape[0]}."
            )
        if not np.all((y == 0.0) | (y == 1.0)):
            raise ModelFitError("Training labels must be 0.0 or 1.0; unlabeled records are not allowed.")

        n_features = X.shape[1]
        if not 1 <= int(feature_subset_size) <= n_features:
            raise ModelFitError(
                f"feature_subset_size must be between 1 and {n_features}, got {feature_subset_size}."
            )
        if max_depth is not None and max_depth < 0:
            raise ModelFitError("max_depth must be non-negative when set.")

        grower = _TreeGrower(
            n_features=n_features,
            feature_subset_size=int(feature_subset_size),
            rng=rng,
            max_depth=max_depth,
            min_samples_split=max(1, int(min_samples_split)),
        )
        root = grower.grow(X, y, depth=0)
        return cls(root=root, n_features=n_features, feature_subset_size=int(feature_subset_size))

    @classmethod
    def from_sample(
        cls,
        sample: Iterable[tuple[Sequence[float], float]],
        feature_subset_size: int,
        rng: np.random.Generator,
        **policy: int | None,
    ) -> "DecisionTree":
        """Fit on an iterable of ``(features, label)`` pairs."""

        pairs = list(sample)
        if not pairs:
            raise ModelFitError("Decision tree requires at least one training sample.")
        X = np.array([features for features, _ in pairs], dtype=float)
        y = np.array([label for _, label in pairs], dtype=float)
        return cls.fit(X, y, feature_subset_size, rng, **policy)

    def predict(self, features: Sequence[float] | np.ndarray) -> float:
        node = self.root
        while not node.is_leaf:
            if features[node.feature] <= node.threshold:
                node = node.left
            else:
                node = node.right
        return float(node.label)

    def predict_many(self, features: np.ndarray) -> np.ndarray:
        X = np.asarray(features, dtype=float)
        return np.array([self.predict(row) for row in X], dtype=float)

    @property
    def depth(self) -> int:
        def _depth(node: TreeNode) -> int:
            if node.is_leaf:
                return 0
            return 1 + max(_depth(node.left), _depth(node.right))

        return _depth(self.root)

    @property
    def n_leaves(self) -> int:
        count = 0
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                count += 1
            else:
                stack.extend((node.left, node.right))
        return count


@dataclass
class _TreeGrower:
    n_features: int
    feature_subset_size: int
    rng: np.random.Generator
    max_depth: int | None
    min_samples_split: int

    def grow(self, X: np.ndarray, y: np.ndarray, depth: int) -> TreeNode:
        label = majority_label(y)
        if (
            y.size < self.min_samples_split
            or (self.max_depth is not None and depth >= self.max_depth)
            or np.all(y == y[0])
        ):
            return TreeNode(label=label)

        candidates = self.rng.choice(self.n_features, size=self.feature_subset_size, replace=False)
        impurity, feature, threshold = _best_split(X, y, candidates)
        if feature is None or impurity >= gini_impurity(y) - _MIN_IMPURITY_DECREASE:
            return TreeNode(label=label)

        mask = X[:, feature] <= threshold
        left = self.grow(X[mask], y[mask], depth + 1)
        right = self.grow(X[~mask], y[~mask], depth + 1)
        return TreeNode(feature=feature, threshold=threshold, left=left, right=right)


__all__ = ["DecisionTree", "TreeNode", "gini_impurity", "majority_label"]
