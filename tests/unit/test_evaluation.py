from __future__ import annotations

from pathlib import Path

import pytest

from oll.classifiers import create_classifier
from oll.evaluation import (
    LabelledExample,
    load_dataset,
    parse_label,
    progressive_validation,
)
from oll.store import MemoryWeightStore

SPAM = "buy cheap pills now"
HAM = "meeting agenda for monday"


@pytest.mark.parametrize(
    "raw, expected",
    [("+1", 1), ("1", 1), (" pos ", 1), ("-1", -1), ("NEG", -1)],
)
def test_parse_label(raw: str, expected: int) -> None:
    assert parse_label(raw) == expected


def test_parse_label_rejects_unknown_values() -> None:
    with pytest.raises(ValueError):
        parse_label("maybe")


def test_load_dataset_skips_comments_and_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "data.tsv"
    path.write_text(
        f"# label\ttext\n+1\t{SPAM}\n\n-1\t{HAM}\twith a tab\n",
        encoding="utf-8",
    )

    examples = load_dataset(path)

    assert examples == [
        LabelledExample(label=1, text=SPAM),
        LabelledExample(label=-1, text=f"{HAM}\twith a tab"),
    ]


def test_load_dataset_reports_malformed_lines(tmp_path: Path) -> None:
    path = tmp_path / "data.tsv"
    path.write_text("+1 missing tab\n", encoding="utf-8")

    with pytest.raises(ValueError, match="data.tsv:1"):
        load_dataset(path)


@pytest.mark.parametrize("algorithm", ["perceptron", "perceptron_aggressive1", "naivebayse"])
def test_progressive_validation_learns_separable_stream(algorithm: str) -> None:
    classifier = create_classifier(algorithm, MemoryWeightStore())
    examples = [
        LabelledExample(label=label, text=text)
        for _ in range(10)
        for label, text in ((1, SPAM), (-1, HAM))
    ]

    report = progressive_validation(classifier, examples)

    assert report.examples == 20
    assert report.mistakes <= 3
    assert report.accuracy >= 0.85
    assert report.updates >= 1
    assert 0.0 <= report.f1 <= 1.0


def test_progressive_validation_of_empty_stream() -> None:
    classifier = create_classifier("perceptron", MemoryWeightStore())

    report = progressive_validation(classifier, [])

    assert report.examples == 0
    assert report.accuracy == 0.0
