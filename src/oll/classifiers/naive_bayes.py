"""Counter-based naive Bayes classifier backed by the weight store."""

from __future__ import annotations

import logging
import math

from ..store import WeightStore, WeightTable
from ..types import EPSILON, CountPair, FeatureKey, FeatureVector, Label, ModelScalar, WeightKey

LOGGER = logging.getLogger(__name__)
TOTAL_POSITIVE_KEY = WeightKey.scalar(ModelScalar.TOTAL_POSITIVE)
TOTAL_NEGATIVE_KEY = WeightKey.scalar(ModelScalar.TOTAL_NEGATIVE)


class NaiveBayesCounter:
    """Binary multinomial naive Bayes with persisted per-feature counts.

    Every count and both class totals start at ``EPSILON`` so the likelihoods
    never take the log of zero.
    """

    name = "naivebayse"

    def __init__(self, store: WeightStore) -> None:
        self._counts = WeightTable(store, default=EPSILON)

    def counts(self, feature: FeatureKey) -> CountPair:
        return CountPair(
            positive=self._counts.get(WeightKey.positive(feature)),
            negative=self._counts.get(WeightKey.negative(feature)),
        )

    def totals(self) -> CountPair:
        return CountPair(
            positive=self._counts.get(TOTAL_POSITIVE_KEY),
            negative=self._counts.get(TOTAL_NEGATIVE_KEY),
        )

    def train(self, x: FeatureVector, y: Label) -> bool:
        if float(y) > 0:
            key_for, total_key = WeightKey.positive, TOTAL_POSITIVE_KEY
        else:
            key_for, total_key = WeightKey.negative, TOTAL_NEGATIVE_KEY
        amounts = [(feature, _validate_count(feature, count)) for feature, count in x.items()]
        total = self._counts.get(total_key)
        for feature, amount in amounts:
            key = key_for(feature)
            self._counts.set(key, self._counts.get(key) + amount)
            total += amount
        self._counts.set(total_key, total)
        return True

    def test(self, x: FeatureVector) -> int:
        totals = self.totals()
        positive_log = 0.0
        negative_log = 0.0
        for feature, count in x.items():
            counts = self.counts(feature)
            weight = float(count)
            positive_log += math.log(counts.positive / totals.positive) * weight
            negative_log += math.log(counts.negative / totals.negative) * weight
        overall = totals.positive + totals.negative
        positive_log += math.log(totals.positive / overall)
        negative_log += math.log(totals.negative / overall)
        LOGGER.debug("naive bayes log-likelihoods: +%.6f -%.6f", positive_log, negative_log)
        return 1 if positive_log > negative_log else -1


def _validate_count(feature: FeatureKey, count: float) -> float:
    value = float(count)
    if not math.isfinite(value) or value < 0:
        raise ValueError(
            f"Feature counts must be finite and non-negative, got {count!r} for {feature!r}"
        )
    return value


__all__ = ["NaiveBayesCounter", "TOTAL_NEGATIVE_KEY", "TOTAL_POSITIVE_KEY"]
