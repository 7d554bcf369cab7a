"""Tests for document frequency, IDF and TF-IDF vectors."""

import math

import pytest

from docs2context.vectorizer import vectorize
from docs2context.vocabulary import Vocabulary


def test_observe_counts_distinct_terms_once():
    """A term repeated inside one chunk increments frequency by one."""
    vocabulary = Vocabulary()
    vocabulary.observe("cat cat cat dog")
    vocabulary.observe("cat bird")

    assert vocabulary.doc_frequency == {"cat": 2, "dog": 1, "bird": 1}


def test_recompute_idf_formula():
    vocabulary = Vocabulary(doc_frequency={"cat": 1, "dog": 3})
    vocabulary.recompute_idf(total_chunks=4)

    assert vocabulary.idf["cat"] == pytest.approx(math.log(4 / 2) + 1)
    assert vocabulary.idf["dog"] == pytest.approx(math.log(4 / 4) + 1)
    assert vocabulary.size == 2


def test_idf_monotonic_in_document_frequency():
    """Rarer terms never weigh less than more common ones."""
    vocabulary = Vocabulary(doc_frequency={"rare": 1, "medium": 3, "common": 9, "tied": 3})
    vocabulary.recompute_idf(total_chunks=10)

    assert vocabulary.idf["rare"] > vocabulary.idf["medium"] > vocabulary.idf["common"]
    assert vocabulary.idf["medium"] == vocabulary.idf["tied"]


def test_recompute_idf_with_empty_index():
    vocabulary = Vocabulary(doc_frequency={"cat": 1})
    vocabulary.recompute_idf(total_chunks=0)
    assert vocabulary.idf["cat"] == pytest.approx(math.log(1 / 2) + 1)


def test_recompute_replaces_stale_terms():
    vocabulary = Vocabulary(doc_frequency={"old": 1})
    vocabulary.recompute_idf(1)
    vocabulary.doc_frequency = {"new": 1}
    vocabulary.recompute_idf(1)

    assert set(vocabulary.idf) == {"new"}


def test_unseen_term_fallback_weight():
    vocabulary = Vocabulary(total_documents=3)
    assert vocabulary.weight("zebra") == pytest.approx(math.log(4))


def test_from_texts():
    vocabulary = Vocabulary.from_texts(["the cat sat", "cat and dog"], total_documents=2)
    assert vocabulary.doc_frequency == {"cat": 2, "sat": 1, "dog": 1}
    assert vocabulary.total_documents == 2


def test_vectorize_augmented_term_frequency():
    vocabulary = Vocabulary(idf={"cat": 2.0, "dog": 1.0})
    vector = vectorize("cat cat dog", vocabulary)

    assert vector["cat"] == pytest.approx((0.5 + 0.5 * 1.0) * 2.0)
    assert vector["dog"] == pytest.approx((0.5 + 0.5 * 0.5) * 1.0)


def test_vectorize_is_sparse():
    vocabulary = Vocabulary(idf={"cat": 1.0, "dog": 1.0, "bird": 1.0})
    assert set(vectorize("cat", vocabulary)) == {"cat"}


def test_vectorize_empty_and_stop_words():
    vocabulary = Vocabulary()
    assert vectorize("", vocabulary) == {}
    assert vectorize("the and of", vocabulary) == {}


def test_vectorize_unseen_terms_use_fallback():
    vocabulary = Vocabulary(idf={"cat": 1.0}, total_documents=1)
    vector = vectorize("zebra", vocabulary)
    assert vector["zebra"] == pytest.approx(math.log(2))
