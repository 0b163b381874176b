"""Algorithm name resolution for the classifier family."""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable
from enum import Enum

from ..config import ConfigError
from ..store import WeightStore
from .base import Classifier
from .naive_bayes import NaiveBayesCounter
from .perceptron import (
    Perceptron,
    PerceptronAggressive,
    PerceptronAggressive1,
    PerceptronAggressive2,
)

LOGGER = logging.getLogger(__name__)

ClassifierConstructor = Callable[[WeightStore], Classifier]


class UnsupportedAlgorithmError(ConfigError):
    """Raised when an algorithm name does not map to a registered classifier."""


class Algorithm(str, Enum):
    """Built-in algorithm names; ``naivebayse`` keeps the historical spelling."""

    PERCEPTRON = "perceptron"
    PERCEPTRON_AGGRESSIVE = "perceptron_aggressive"
    PERCEPTRON_AGGRESSIVE1 = "perceptron_aggressive1"
    PERCEPTRON_AGGRESSIVE2 = "perceptron_aggressive2"
    NAIVEBAYSE = "naivebayse"


BUILTIN_CLASSIFIERS: dict[Algorithm, ClassifierConstructor] = {
    Algorithm.PERCEPTRON: Perceptron,
    Algorithm.PERCEPTRON_AGGRESSIVE: PerceptronAggressive,
    Algorithm.PERCEPTRON_AGGRESSIVE1: PerceptronAggressive1,
    Algorithm.PERCEPTRON_AGGRESSIVE2: PerceptronAggressive2,
    Algorithm.NAIVEBAYSE: NaiveBayesCounter,
}


class ClassifierFactory:
    """Maps algorithm names to constructors bound to a weight store."""

    def __init__(self, constructors: dict[str, ClassifierConstructor] | None = None) -> None:
        self._constructors: OrderedDict[str, ClassifierConstructor] = OrderedDict()
        for name, constructor in (constructors or {}).items():
            self.register(name, constructor)

    def register(self, name: str, constructor: ClassifierConstructor) -> None:
        normalized = _normalize_name(name)
        if not normalized:
            raise ValueError("Algorithm name cannot be empty.")
        if normalized in self._constructors:
            raise ValueError(f"Algorithm '{normalized}' is already registered.")
        self._constructors[normalized] = constructor

    def names(self) -> list[str]:
        return list(self._constructors)

    def create(self, name: str, store: WeightStore) -> Classifier:
        """Return the classifier registered as ``name`` bound to ``store``.

        The name is resolved before the store is opened, so an unknown name
        never touches storage.
        """

        normalized = _normalize_name(name)
        try:
            constructor = self._constructors[normalized]
        except KeyError as exc:
            raise UnsupportedAlgorithmError(f"Unsupported algorithm '{name}'.") from exc
        store.open()
        classifier = constructor(store)
        LOGGER.debug("Created '%s' classifier", normalized)
        return classifier


def _normalize_name(name: str) -> str:
    if isinstance(name, Enum):
        name = name.value
    return str(name).strip().lower()


DEFAULT_FACTORY = ClassifierFactory(
    {algorithm.value: constructor for algorithm, constructor in BUILTIN_CLASSIFIERS.items()}
)


def create_classifier(name: str, store: WeightStore) -> Classifier:
    """Shortcut for ``DEFAULT_FACTORY.create``."""

    return DEFAULT_FACTORY.create(name, store)


__all__ = [
    "Algorithm",
    "BUILTIN_CLASSIFIERS",
    "ClassifierFactory",
    "DEFAULT_FACTORY",
    "UnsupportedAlgorithmError",
    "create_classifier",
]
