from __future__ import annotations

import pytest

from oll.classifiers import UnsupportedAlgorithmError, create_classifier
from oll.classifiers.registry import Algorithm
from oll.features import make_vector
from oll.store import SqliteWeightStore

SPAM_TEXTS = (
    "buy cheap pills now",
    "cheap meds, free money, claim now",
    "win a free prize now",
)
HAM_TEXTS = (
    "meeting agenda for monday",
    "notes from the planning session",
    "lunch on thursday with the team",
)


def _train_stream(classifier, rounds: int = 5) -> None:
    for _ in range(rounds):
        for spam, ham in zip(SPAM_TEXTS, HAM_TEXTS):
            classifier.train(make_vector(spam), 1)
            classifier.train(make_vector(ham), -1)


@pytest.mark.parametrize("algorithm", [member.value for member in Algorithm])
def test_model_survives_reopening(database_path, algorithm):
    probe = make_vector("free pills and a prize")

    with SqliteWeightStore(database_path, table="model") as store:
        classifier = create_classifier(algorithm, store)
        _train_stream(classifier)
        before = classifier.test(probe)
        assert all(classifier.test(make_vector(text)) > 0 for text in SPAM_TEXTS)
        assert all(classifier.test(make_vector(text)) < 0 for text in HAM_TEXTS)

    with SqliteWeightStore(database_path, table="model") as store:
        reloaded = create_classifier(algorithm, store)
        assert reloaded.test(probe) == before


def test_models_in_separate_tables_do_not_interfere(database_path):
    x = make_vector("hello there")

    with SqliteWeightStore(database_path, table="first") as first, SqliteWeightStore(
        database_path, table="second"
    ) as second:
        create_classifier("perceptron", first).train(x, 1)
        create_classifier("perceptron", second).train(x, -1)

        assert create_classifier("perceptron", first).test(x) > 0
        assert create_classifier("perceptron", second).test(x) < 0


def test_unknown_algorithm_leaves_no_database_behind(database_path):
    store = SqliteWeightStore(database_path)

    with pytest.raises(UnsupportedAlgorithmError):
        create_classifier("foo", store)

    assert store.is_open is False
    assert not database_path.exists()


def test_unseen_features_are_not_persisted(database_path):
    with SqliteWeightStore(database_path) as store:
        classifier = create_classifier("perceptron_aggressive2", store)
        classifier.train(make_vector("ab"), 1)
        entries = store.count()

        classifier.test(make_vector("completely unrelated words"))

        assert store.count() == entries
