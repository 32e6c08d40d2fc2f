"""
In-memory corpus index and cosine similarity scan.
"""

from typing import Optional, Tuple

import numpy as np

from .types import TrainedCorpus


def cosine_similarity(a, b) -> float:
    """Cosine similarity of two vectors, 0.0 when either has zero norm."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Vector dimension mismatch: {a.shape} vs {b.shape}")

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def cosine_scores(query: np.ndarray, embeddings: np.ndarray) -> np.ndarray:
    """Cosine similarity of a query against every row of an embedding matrix.

    Rows with zero norm (degraded embeddings) score exactly 0, as does every
    row when the query itself is the zero vector.
    """
    query = np.asarray(query, dtype=np.float64)
    if embeddings.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)
    if embeddings.shape[1] != query.shape[0]:
        raise ValueError(f"Vector dimension {query.shape[0]} does not match corpus dimension {embeddings.shape[1]}")

    query_norm = np.linalg.norm(query)
    row_norms = np.linalg.norm(embeddings, axis=1)
    denominators = row_norms * query_norm

    scores = np.zeros(embeddings.shape[0], dtype=np.float64)
    nonzero = denominators > 0
    scores[nonzero] = (embeddings[nonzero] @ query) / denominators[nonzero]
    return scores


def best_match(query: np.ndarray, corpus: TrainedCorpus) -> Optional[Tuple[int, float, np.ndarray]]:
    """Find the highest scoring corpus entry for a query vector.

    Ties go to the earliest entry in insertion order.

    Returns:
        (index, score, all_scores), or None for an empty corpus
    """
    if corpus.is_empty:
        return None

    scores = cosine_scores(query, corpus.embeddings)
    # argmax returns the first occurrence of the maximum
    index = int(np.argmax(scores))
    return index, float(scores[index]), scores


class CorpusIndex:
    """Holder for the published corpus.

    Readers take a reference to ``current`` once and work on that snapshot.
    ``publish`` replaces the whole corpus in a single assignment, so a reader
    sees either the previous corpus or the new one, never a mix.
    """

    def __init__(self, dimension: int = 0):
        self._corpus = TrainedCorpus.empty(dimension)

    @property
    def current(self) -> TrainedCorpus:
        return self._corpus

    @property
    def is_empty(self) -> bool:
        return self._corpus.is_empty

    def publish(self, corpus: TrainedCorpus) -> None:
        """Replace the published corpus."""
        self._corpus = corpus

    def clear(self) -> None:
        """Drop the in-memory corpus."""
        self._corpus = TrainedCorpus.empty(self._corpus.dimension)

    def __len__(self) -> int:
        return len(self._corpus)
