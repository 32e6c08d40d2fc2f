"""
Data types for the trained corpus and match results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class TrainedCorpus:
    """Index-aligned sentences and their embeddings.

    The i-th sentence corresponds to the i-th row of ``embeddings``. Instances
    are immutable; retraining builds a new corpus and publishes it whole.
    """

    sentences: Tuple[str, ...]
    """Reference sentences in insertion order"""

    embeddings: np.ndarray
    """Matrix of shape (len(sentences), dimension)"""

    failed: int = 0
    """Number of sentences whose embedding degraded to the zero vector"""

    def __post_init__(self):
        embeddings = np.array(self.embeddings, dtype=np.float64)
        if embeddings.ndim != 2:
            raise ValueError(f"Embeddings must be a 2-D matrix, got shape {embeddings.shape}")
        if len(self.sentences) != embeddings.shape[0]:
            raise ValueError(
                f"Corpus misaligned: {len(self.sentences)} sentences, {embeddings.shape[0]} embeddings"
            )
        embeddings.setflags(write=False)
        object.__setattr__(self, "sentences", tuple(self.sentences))
        object.__setattr__(self, "embeddings", embeddings)

    @classmethod
    def empty(cls, dimension: int = 0) -> "TrainedCorpus":
        return cls((), np.zeros((0, dimension), dtype=np.float64))

    @classmethod
    def from_vectors(cls, sentences: Sequence[str], vectors: Sequence[np.ndarray], dimension: int,
                     failed: int = 0) -> "TrainedCorpus":
        """Build a corpus from one vector per sentence."""
        if not vectors:
            return cls.empty(dimension)
        return cls(tuple(sentences), np.vstack(vectors), failed)

    @property
    def dimension(self) -> int:
        return self.embeddings.shape[1]

    @property
    def is_empty(self) -> bool:
        return len(self.sentences) == 0

    def __len__(self) -> int:
        return len(self.sentences)


class MatchStatus(str, Enum):
    """Outcome of a match query."""

    MATCHED = "matched"
    BELOW_THRESHOLD = "below_threshold"
    NO_DATA = "no_data"
    EMBEDDING_FAILED = "embedding_failed"


class ReadyState(str, Enum):
    """Whether the corpus can serve matches."""

    READY = "ready"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class MatchOutcome:
    """Result of matching a query sentence against the corpus."""

    status: MatchStatus
    best_match: Optional[str] = None
    best_score: Optional[float] = None

    @classmethod
    def matched(cls, sentence: str, score: float) -> "MatchOutcome":
        return cls(MatchStatus.MATCHED, sentence, score)

    @classmethod
    def below_threshold(cls, score: float) -> "MatchOutcome":
        return cls(MatchStatus.BELOW_THRESHOLD, None, score)

    @classmethod
    def no_data(cls) -> "MatchOutcome":
        return cls(MatchStatus.NO_DATA)

    @classmethod
    def embedding_failed(cls) -> "MatchOutcome":
        return cls(MatchStatus.EMBEDDING_FAILED)

    def to_response(self) -> Dict[str, object]:
        """JSON-serializable ``{bestMatch, bestScore}`` payload."""
        return {"bestMatch": self.best_match, "bestScore": self.best_score}


@dataclass(frozen=True)
class TrainOutcome:
    """Success or failure of a training request."""

    success: bool
    message: str
    count: int = 0
    failed: int = 0
