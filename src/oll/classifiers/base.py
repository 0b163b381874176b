"""Classifier protocol definitions."""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from ..types import FeatureVector, Label


@runtime_checkable
class Classifier(Protocol):
    """Common interface shared by all online binary classifiers."""

    name: str

    def train(self, x: FeatureVector, y: Label) -> bool:
        """Incrementally train the classifier with a single sample."""

    def test(self, x: FeatureVector) -> float:
        """Return a score whose sign is the predicted label."""


class SynchronizedClassifier:
    """Serialises every call on a shared classifier through one lock.

    ``train`` performs a read-modify-write per feature, so concurrent callers
    sharing a model must go through a single writer.
    """

    def __init__(self, classifier: Classifier) -> None:
        self._classifier = classifier
        self._lock = threading.RLock()
        self.name = classifier.name

    @property
    def wrapped(self) -> Classifier:
        return self._classifier

    def train(self, x: FeatureVector, y: Label) -> bool:
        with self._lock:
            return self._classifier.train(x, y)

    def test(self, x: FeatureVector) -> float:
        with self._lock:
            return self._classifier.test(x)


__all__ = ["Classifier", "SynchronizedClassifier"]
