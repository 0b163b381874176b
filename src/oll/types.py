"""Core immutable data structures shared by the store and the classifiers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, IntEnum

EPSILON = 1e-7

FeatureKey = str | bytes
FeatureVector = Mapping[FeatureKey, float]
Label = float


class KeyKind(IntEnum):
    """Tag byte written in front of every persisted key."""

    WEIGHT = 0
    POSITIVE_COUNT = 1
    NEGATIVE_COUNT = 2
    SCALAR = 3


class ModelScalar(str, Enum):
    """Algorithm-level values stored next to the per-feature entries."""

    BIAS = "bias"
    TOTAL_POSITIVE = "total_positive"
    TOTAL_NEGATIVE = "total_negative"


@dataclass(frozen=True)
class WeightKey:
    """Storage key tagged with the kind of value it addresses.

    Feature-derived keys and model scalars live in disjoint namespaces: the
    encoded form always starts with the ``KeyKind`` byte, so a feature spelled
    like a reserved scalar can never alias it.
    """

    kind: KeyKind
    name: bytes

    @classmethod
    def weight(cls, feature: FeatureKey) -> WeightKey:
        return cls(KeyKind.WEIGHT, _feature_bytes(feature))

    @classmethod
    def positive(cls, feature: FeatureKey) -> WeightKey:
        return cls(KeyKind.POSITIVE_COUNT, _feature_bytes(feature))

    @classmethod
    def negative(cls, feature: FeatureKey) -> WeightKey:
        return cls(KeyKind.NEGATIVE_COUNT, _feature_bytes(feature))

    @classmethod
    def scalar(cls, scalar: ModelScalar) -> WeightKey:
        return cls(KeyKind.SCALAR, scalar.value.encode("ascii"))

    def encode(self) -> bytes:
        """Return the byte string persisted as the primary key."""

        return bytes((int(self.kind),)) + self.name


@dataclass(frozen=True)
class CountPair:
    """Positive/negative occurrence counts kept by the naive Bayes counter."""

    positive: float = EPSILON
    negative: float = EPSILON


def _feature_bytes(feature: FeatureKey) -> bytes:
    if isinstance(feature, bytes):
        return feature
    if isinstance(feature, str):
        return feature.encode("utf-8")
    raise TypeError(f"Feature keys must be str or bytes, got {type(feature).__name__}")


__all__ = [
    "EPSILON",
    "CountPair",
    "FeatureKey",
    "FeatureVector",
    "KeyKind",
    "Label",
    "ModelScalar",
    "WeightKey",
]
