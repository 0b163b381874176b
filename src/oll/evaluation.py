"""Progressive (test-then-train) validation of online classifiers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from sklearn.metrics import accuracy_score, precision_recall_fscore_support

from .classifiers.base import Classifier
from .features import make_vector
from .types import FeatureVector

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LabelledExample:
    """One line of an evaluation dataset."""

    label: int
    text: str


@dataclass(frozen=True)
class EvaluationReport:
    """Summary of a progressive validation run."""

    examples: int
    mistakes: int
    updates: int
    accuracy: float
    precision: float
    recall: float
    f1: float


def load_dataset(path: Path) -> list[LabelledExample]:
    """Read ``label<TAB>text`` lines, skipping blanks and ``#`` comments."""

    examples: list[LabelledExample] = []
    with path.open("r", encoding="utf-8") as handle:
        for lineno, line in enumerate(handle, start=1):
            stripped = line.rstrip("\r\n")
            if not stripped.strip() or stripped.lstrip().startswith("#"):
                continue
            if "\t" not in stripped:
                raise ValueError(f"{path}:{lineno}: expected '<label>\\t<text>'")
            raw_label, text = stripped.split("\t", 1)
            examples.append(LabelledExample(label=parse_label(raw_label), text=text))
    return examples


def parse_label(raw: str) -> int:
    """Map ``+1``/``1``/``-1`` (and ``pos``/``neg``) onto a signed label."""

    normalized = str(raw).strip().lower()
    if normalized in {"+1", "1", "+", "pos", "positive"}:
        return 1
    if normalized in {"-1", "-", "neg", "negative"}:
        return -1
    raise ValueError(f"Unrecognised label: {raw!r}")


def progressive_validation(
    classifier: Classifier,
    examples: Iterable[LabelledExample],
    *,
    vectorizer: Callable[[str], FeatureVector] = make_vector,
) -> EvaluationReport:
    """Score each example before training on it and summarise the predictions."""

    truth: list[int] = []
    predicted: list[int] = []
    updates = 0
    for example in examples:
        x = vectorizer(example.text)
        score = classifier.test(x)
        truth.append(example.label)
        predicted.append(1 if score > 0 else -1)
        if classifier.train(x, example.label):
            updates += 1

    if not truth:
        return EvaluationReport(0, 0, 0, 0.0, 0.0, 0.0, 0.0)

    y_true = np.asarray(truth, dtype=np.int64)
    y_pred = np.asarray(predicted, dtype=np.int64)
    precision, recall, f1, _support = precision_recall_fscore_support(
        y_true, y_pred, pos_label=1, average="binary", zero_division=0
    )
    mistakes = int(np.count_nonzero(y_true != y_pred))
    report = EvaluationReport(
        examples=int(y_true.size),
        mistakes=mistakes,
        updates=updates,
        accuracy=float(accuracy_score(y_true, y_pred)),
        precision=float(precision),
        recall=float(recall),
        f1=float(f1),
    )
    LOGGER.info(
        "Evaluated %s on %d example(s): accuracy=%.4f mistakes=%d",
        classifier.name,
        report.examples,
        report.accuracy,
        report.mistakes,
    )
    return report


__all__ = [
    "EvaluationReport",
    "LabelledExample",
    "load_dataset",
    "parse_label",
    "progressive_validation",
]
