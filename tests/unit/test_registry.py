from __future__ import annotations

import threading

import pytest

from oll.classifiers import (
    Algorithm,
    ClassifierFactory,
    NaiveBayesCounter,
    Perceptron,
    PerceptronAggressive,
    PerceptronAggressive1,
    PerceptronAggressive2,
    SynchronizedClassifier,
    UnsupportedAlgorithmError,
    create_classifier,
)
from oll.classifiers.registry import DEFAULT_FACTORY
from oll.config import ConfigError
from oll.store import MemoryWeightStore
from oll.types import EPSILON


class UntouchableStore:
    """Store that records any access so tests can assert it was never used."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def open(self) -> None:
        self.calls.append("open")

    def get(self, key: bytes) -> float | None:
        self.calls.append("get")
        return None

    def set(self, key: bytes, value: float) -> None:
        self.calls.append("set")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("perceptron", Perceptron),
        ("perceptron_aggressive", PerceptronAggressive),
        ("perceptron_aggressive1", PerceptronAggressive1),
        ("perceptron_aggressive2", PerceptronAggressive2),
        ("naivebayse", NaiveBayesCounter),
    ],
)
def test_factory_resolves_builtin_names(name, expected):
    classifier = create_classifier(name, MemoryWeightStore())

    assert type(classifier) is expected
    assert classifier.name == name


def test_factory_normalizes_case_and_whitespace():
    classifier = create_classifier("  Perceptron_Aggressive1 ", MemoryWeightStore())

    assert isinstance(classifier, PerceptronAggressive1)


def test_factory_accepts_enum_members():
    classifier = create_classifier(Algorithm.NAIVEBAYSE, MemoryWeightStore())

    assert isinstance(classifier, NaiveBayesCounter)


def test_factory_opens_the_store():
    store = MemoryWeightStore()
    classifier = create_classifier("perceptron", store)

    classifier.train({"ab": 1}, 1)

    assert store.count() == 2


def test_unknown_algorithm_fails_without_touching_storage():
    store = UntouchableStore()

    with pytest.raises(UnsupportedAlgorithmError) as excinfo:
        create_classifier("foo", store)

    assert isinstance(excinfo.value, ConfigError)
    assert "foo" in str(excinfo.value)
    assert store.calls == []


def test_builtin_names_are_listed():
    assert DEFAULT_FACTORY.names() == [algorithm.value for algorithm in Algorithm]


def test_register_adds_variant_without_changing_dispatch():
    class Conservative(Perceptron):
        name = "conservative"

    factory = ClassifierFactory({"perceptron": Perceptron})
    factory.register("Conservative", Conservative)

    assert factory.names() == ["perceptron", "conservative"]
    assert isinstance(factory.create("conservative", MemoryWeightStore()), Conservative)
    with pytest.raises(UnsupportedAlgorithmError):
        factory.create("naivebayse", MemoryWeightStore())


def test_register_rejects_duplicates_and_empty_names():
    factory = ClassifierFactory()
    factory.register("perceptron", Perceptron)

    with pytest.raises(ValueError):
        factory.register("PERCEPTRON", Perceptron)
    with pytest.raises(ValueError):
        factory.register("  ", Perceptron)


def test_synchronized_classifier_serializes_training():
    store = MemoryWeightStore()
    shared = SynchronizedClassifier(create_classifier("naivebayse", store))

    def _worker() -> None:
        for _ in range(50):
            shared.train({"a": 1}, 1)

    threads = [threading.Thread(target=_worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert shared.name == "naivebayse"
    assert shared.wrapped.counts("a").positive == pytest.approx(EPSILON + 200)
    assert shared.test({"a": 1}) == 1
