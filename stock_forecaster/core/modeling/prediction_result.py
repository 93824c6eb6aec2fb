from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Iterator, Mapping

from ..records import Label


@dataclass(frozen=True)
class RunOutcome:
    """Result of one split -> fit -> evaluate -> predict classification run."""

    run: int
    raw_accuracy: float
    raw_label: Label
    train_size: int
    test_size: int

    @property
    def inverted(self) -> bool:
        """Whether the below-chance heuristic flips this run."""

        return self.raw_accuracy < 0.5

    @property
    def accuracy(self) -> float:
        return 1.0 - self.raw_accuracy if self.inverted else self.raw_accuracy

    @property
    def label(self) -> Label:
        return self.raw_label.inverted() if self.inverted else self.raw_label

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["raw_label"] = self.raw_label.value
        payload["label"] = self.label.value
        payload["accuracy"] = self.accuracy
        payload["inverted"] = self.inverted
        return payload


@dataclass
class PredictionResult(Mapping[str, Any]):
    """Container for the directional verdict, its confidence and the price projection."""

    direction: Label
    confidence_percent: float
    expected_price: float
    runs: list[RunOutcome] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def up_votes(self) -> int:
        return sum(1 for outcome in self.runs if outcome.label is Label.UP)

    @property
    def down_votes(self) -> int:
        return sum(1 for outcome in self.runs if outcome.label is Label.DOWN)

    def as_tuple(self) -> tuple[Label, float, float]:
        return self.direction, self.confidence_percent, self.expected_price

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dictionary representation suitable for serialization."""

        payload = {
            "direction": self.direction.value,
            "confidence_percent": self.confidence_percent,
            "expected_price": self.expected_price,
            "up_votes": self.up_votes,
            "down_votes": self.down_votes,
            "runs": [outcome.to_dict() for outcome in self.runs],
        }
        return {**self.meta, **payload}

    # Mapping protocol -------------------------------------------------
    def __getitem__(self, key: str) -> Any:  # pragma: no cover - trivial mapping wrapper
        return self.to_dict()[key]

    def __iter__(self) -> Iterator[str]:  # pragma: no cover - trivial mapping wrapper
        return iter(self.to_dict())

    def __len__(self) -> int:  # pragma: no cover - trivial mapping wrapper
        return len(self.to_dict())

    def get(self, key: str, default: Any | None = None) -> Any:
        """Fetch a value from the combined payload and metadata."""

        return self.to_dict().get(key, default)


def aggregate_runs(outcomes: list[RunOutcome]) -> tuple[Label, float]:
    """Majority direction (ties favour ``UP``) and mean accuracy as a percentage."""

    if not outcomes:
        raise ValueError("At least one run outcome is required.")
    up = sum(1 for outcome in outcomes if outcome.label is Label.UP)
    down = len(outcomes) - up
    direction = Label.UP if up >= down else Label.DOWN
    confidence = 100.0 * sum(outcome.accuracy for outcome in outcomes) / len(outcomes)
    return direction, confidence


__all__ = ["PredictionResult", "RunOutcome", "aggregate_runs"]
