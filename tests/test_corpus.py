"""
Trained corpus invariants, the corpus index and the persisted sentence list.
"""

import json

import numpy as np
import pytest

from semantic_match.core.corpus_file import SentenceListStore
from semantic_match.core.exceptions import CorpusFileError
from semantic_match.vector.index import CorpusIndex
from semantic_match.vector.types import TrainedCorpus, MatchOutcome, MatchStatus


def test_corpus_alignment_enforced():
    with pytest.raises(ValueError, match="misaligned"):
        TrainedCorpus(("a", "b"), np.zeros((3, 4)))


def test_corpus_requires_matrix():
    with pytest.raises(ValueError):
        TrainedCorpus(("a",), np.zeros(4))


def test_corpus_is_read_only():
    corpus = TrainedCorpus(["a"], np.ones((1, 2)))

    assert corpus.sentences == ("a",)
    with pytest.raises(ValueError):
        corpus.embeddings[0, 0] = 5.0


def test_from_vectors_and_empty():
    corpus = TrainedCorpus.from_vectors(["a", "b"], [np.ones(3), np.zeros(3)], 3)

    assert len(corpus) == 2
    assert corpus.dimension == 3
    assert not corpus.is_empty

    empty = TrainedCorpus.from_vectors([], [], 3)
    assert empty.is_empty
    assert empty.dimension == 3


def test_corpus_index_publish_replaces_whole_corpus():
    index = CorpusIndex()
    assert index.is_empty

    first = TrainedCorpus(("a",), np.ones((1, 2)))
    second = TrainedCorpus(("b", "c"), np.ones((2, 2)))

    index.publish(first)
    snapshot = index.current
    index.publish(second)

    # A reader holding the old snapshot still sees a complete corpus
    assert snapshot.sentences == ("a",)
    assert index.current is second
    assert len(index) == 2

    index.clear()
    assert index.is_empty
    assert index.current.dimension == 2


def test_match_outcome_responses():
    assert MatchOutcome.matched("s", 0.9).to_response() == {"bestMatch": "s", "bestScore": 0.9}
    assert MatchOutcome.below_threshold(0.1).to_response() == {"bestMatch": None, "bestScore": 0.1}
    assert MatchOutcome.no_data().to_response() == {"bestMatch": None, "bestScore": None}
    assert MatchOutcome.embedding_failed().to_response() == {"bestMatch": None, "bestScore": None}
    assert MatchOutcome.no_data().status is MatchStatus.NO_DATA
    assert MatchOutcome.embedding_failed().status is MatchStatus.EMBEDDING_FAILED


def test_store_load_missing_returns_none(tmp_path):
    store = SentenceListStore(tmp_path / "missing.json")

    assert not store.exists()
    assert store.load() is None


def test_store_save_and_load(tmp_path):
    path = tmp_path / "nested" / "training.json"
    store = SentenceListStore(path)

    store.save(["The cat sleeps on the mat.", "Café au lait."])

    assert store.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == ["The cat sleeps on the mat.", "Café au lait."]
    assert store.load() == ["The cat sleeps on the mat.", "Café au lait."]


def test_store_save_overwrites(tmp_path):
    store = SentenceListStore(tmp_path / "training.json")

    store.save(["one", "two", "three"])
    store.save(["four"])

    assert store.load() == ["four"]
    # No temp files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["training.json"]


@pytest.mark.parametrize("content", ["not json", '{"a": 1}', '["ok", 3]'])
def test_store_malformed_file_raises(tmp_path, content):
    path = tmp_path / "training.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(CorpusFileError):
        SentenceListStore(path).load()


def test_store_delete(tmp_path):
    store = SentenceListStore(tmp_path / "training.json")
    store.save(["x"])

    store.delete()
    store.delete()

    assert not store.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
