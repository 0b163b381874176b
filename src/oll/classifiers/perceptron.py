"""Mistake-driven perceptron and its passive-aggressive variants."""

from __future__ import annotations

import logging

from ..store import WeightStore, WeightTable
from ..types import FeatureKey, FeatureVector, Label, ModelScalar, WeightKey

LOGGER = logging.getLogger(__name__)
BIAS_KEY = WeightKey.scalar(ModelScalar.BIAS)


class Perceptron:
    """Classic perceptron over sparse feature vectors.

    Weights are loaded lazily from the store and written back on every update.
    The bias is updated multiplicatively (``bias *= step``), so a model that
    starts from a zero bias keeps it at zero.
    """

    name = "perceptron"
    update_score_threshold = 0.0

    def __init__(self, store: WeightStore) -> None:
        self._weights = WeightTable(store, default=0.0)

    @property
    def bias(self) -> float:
        return self._weights.get(BIAS_KEY)

    def weight(self, feature: FeatureKey) -> float:
        """Return the current weight of ``feature`` (0.0 when never trained)."""

        return self._weights.get(WeightKey.weight(feature))

    def train(self, x: FeatureVector, y: Label) -> bool:
        label = _normalize_label(y)
        score = label * self.margin(x)
        if score > self.update_score_threshold:
            return False
        step = label * self.normalize(x, score)
        self._update(x, step)
        LOGGER.debug(
            "%s update: score=%.6f step=%.6f features=%d", self.name, score, step, len(x)
        )
        return True

    def test(self, x: FeatureVector) -> float:
        return self.margin(x)

    def margin(self, x: FeatureVector) -> float:
        total = self.bias
        for feature, count in x.items():
            total += self.weight(feature) * float(count)
        return total

    def normalize(self, x: FeatureVector, score: float) -> float:
        """Scale applied to the label on an update."""

        return 1.0

    def _update(self, x: FeatureVector, step: float) -> None:
        for feature, count in x.items():
            key = WeightKey.weight(feature)
            self._weights.set(key, self._weights.get(key) + step * float(count))
        self._weights.set(BIAS_KEY, self.bias * step)


class PerceptronAggressive(Perceptron):
    """Passive-aggressive perceptron scaled by the squared norm of the sample."""

    name = "perceptron_aggressive"
    update_score_threshold = 1.0

    def normalize(self, x: FeatureVector, score: float) -> float:
        return _sum_squares_plus_one(x)


class PerceptronAggressive1(Perceptron):
    """PA-I: the correction is clipped at ``delta``."""

    name = "perceptron_aggressive1"
    update_score_threshold = 1.0
    delta = 1.0

    def normalize(self, x: FeatureVector, score: float) -> float:
        return min(self.delta, (1.0 - score) / _sum_squares_plus_one(x))


class PerceptronAggressive2(Perceptron):
    """PA-II: the correction is damped by ``1 / (2 * delta)``."""

    name = "perceptron_aggressive2"
    update_score_threshold = 1.0
    delta = 1.0

    def normalize(self, x: FeatureVector, score: float) -> float:
        return (1.0 - score) / (_sum_squares_plus_one(x) + 1.0 / 2.0 / self.delta)


def _sum_squares_plus_one(x: FeatureVector) -> float:
    total = 1.0
    for count in x.values():
        total += float(count) * float(count)
    return total


def _normalize_label(label: Label) -> float:
    value = float(label)
    if value not in (1.0, -1.0):
        raise ValueError(f"Perceptron labels must be +1 or -1, got {label!r}")
    return value


__all__ = [
    "BIAS_KEY",
    "Perceptron",
    "PerceptronAggressive",
    "PerceptronAggressive1",
    "PerceptronAggressive2",
]
