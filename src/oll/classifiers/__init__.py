"""Classifier implementations and infrastructure."""

from .base import Classifier, SynchronizedClassifier
from .naive_bayes import NaiveBayesCounter
from .perceptron import (
    Perceptron,
    PerceptronAggressive,
    PerceptronAggressive1,
    PerceptronAggressive2,
)
from .registry import (
    Algorithm,
    ClassifierFactory,
    UnsupportedAlgorithmError,
    create_classifier,
)

__all__ = [
    "Algorithm",
    "Classifier",
    "ClassifierFactory",
    "NaiveBayesCounter",
    "Perceptron",
    "PerceptronAggressive",
    "PerceptronAggressive1",
    "PerceptronAggressive2",
    "SynchronizedClassifier",
    "UnsupportedAlgorithmError",
    "create_classifier",
]
