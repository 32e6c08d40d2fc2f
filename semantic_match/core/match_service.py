"""
Semantic match service: trains the in-memory corpus and matches queries
against it.

The service owns the embedder, the published corpus and the persisted
sentence list. Training embeds every sentence concurrently, builds a complete
new corpus and publishes it in one step. Matching rehydrates the corpus from
the persisted sentences when memory is empty, then scans it by cosine
similarity.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional, Sequence

from . import config
from .corpus_file import SentenceListStore
from .exceptions import (
    CorpusFileError,
    EmbeddingError,
    EmptyCorpusError,
    SemanticMatchError,
)
from ..vector.embeddings import Embedder, IEmbeddingProvider
from ..vector.index import CorpusIndex, best_match
from ..vector.types import MatchOutcome, ReadyState, TrainedCorpus, TrainOutcome
from ..util.logging import logger


class SemanticMatchService:
    """
    Trainer and matcher over a single shared corpus.

    Concurrent ``train`` calls are resolved latest-wins: each call takes a
    generation number when it starts, and only the most recent call publishes
    and persists its corpus.
    """

    def __init__(self, provider: Optional[IEmbeddingProvider] = None,
                 training_file: Optional[str] = None,
                 threshold: Optional[float] = None,
                 embed_timeout: Optional[float] = None):
        """
        Initialize the service.

        Args:
            provider: Embedding provider, defaults to the configured one
            training_file: Path of the persisted sentence list
            threshold: Minimum similarity for a confident match
            embed_timeout: Per-embedding timeout in seconds
        """
        if provider is None:
            provider = config.get_embedding_provider()
        if embed_timeout is None:
            embed_timeout = config.get_embed_timeout()

        self.embedder = Embedder(provider, timeout=embed_timeout)
        self.index = CorpusIndex()
        self.store = SentenceListStore(training_file or config.TRAINING_FILE)
        self.threshold = config.SIMILARITY_THRESHOLD if threshold is None else threshold

        self._generation = 0
        self._ready_lock: Optional[asyncio.Lock] = None

    async def train(self, sentences: Sequence[str], persist: bool = True) -> TrainedCorpus:
        """
        Embed ``sentences`` and replace the corpus with them.

        Sentences whose embedding fails keep their slot with a zero vector.

        Raises:
            EmptyCorpusError: no sentences given
            ModelLoadError: the embedding model could not be loaded
            OSError: the sentence list could not be persisted
        """
        sentences = list(sentences)
        if not sentences:
            raise EmptyCorpusError("No training sentences provided.")
        if not all(isinstance(s, str) for s in sentences):
            raise TypeError("Training sentences must be strings.")

        start = time.time()
        await self.embedder.ensure_loaded()

        self._generation += 1
        generation = self._generation

        results = await asyncio.gather(*(self.embedder.embed_or_zero(s) for s in sentences))
        vectors = [vector for vector, _ in results]
        failed = sum(1 for _, ok in results if not ok)

        corpus = TrainedCorpus.from_vectors(sentences, vectors, self.embedder.dimension, failed)
        duration_ms = (time.time() - start) * 1000

        if generation != self._generation:
            logger.log_training(len(sentences), failed, status="superseded",
                                duration_ms=duration_ms, generation=generation)
            return corpus

        if persist:
            self.store.save(sentences)
        self.index.publish(corpus)

        logger.log_training(len(sentences), failed, duration_ms=duration_ms, generation=generation)
        return corpus

    async def ensure_ready(self) -> ReadyState:
        """Make sure a corpus is available, rehydrating from disk if needed."""
        corpus = await self._ready_corpus()
        return ReadyState.NO_DATA if corpus is None else ReadyState.READY

    async def _ready_corpus(self) -> Optional[TrainedCorpus]:
        """
        Corpus to match against, or None when there is no training data.

        A rehydration overtaken by a newer train is not published, but its
        corpus still reflects the persisted list and is returned until the
        newer train publishes.
        """
        corpus = self.index.current
        if not corpus.is_empty:
            return corpus

        if self._ready_lock is None:
            self._ready_lock = asyncio.Lock()

        async with self._ready_lock:
            corpus = self.index.current
            if not corpus.is_empty:
                return corpus

            try:
                saved = self.store.load()
            except CorpusFileError as e:
                logger.error(f"Cannot rehydrate corpus: {e}")
                return None

            if not saved:
                logger.warning("No training data available.")
                return None

            logger.info(f"Rehydrating corpus from {self.store.path} ({len(saved)} sentences)")
            rehydrated = await self.train(saved, persist=False)

        current = self.index.current
        return rehydrated if current.is_empty else current

    async def match(self, query: str) -> MatchOutcome:
        """
        Find the corpus sentence most similar to ``query``.

        Raises:
            ModelLoadError: the embedding model could not be loaded
        """
        start = time.time()
        await self.embedder.ensure_loaded()

        corpus = await self._ready_corpus()
        if corpus is None:
            outcome = MatchOutcome.no_data()
            logger.log_match(query, outcome.status.value, duration_ms=(time.time() - start) * 1000)
            return outcome

        try:
            query_vector = await self.embedder.embed(query)
        except EmbeddingError as e:
            logger.error(f"Test sentence error: {e}")
            outcome = MatchOutcome.embedding_failed()
            logger.log_match(query, outcome.status.value, duration_ms=(time.time() - start) * 1000)
            return outcome

        result = best_match(query_vector, corpus)
        if result is None:
            return MatchOutcome.no_data()

        index, score, scores = result
        if config.debug_enabled():
            for sentence, sentence_score in zip(corpus.sentences, scores):
                logger.debug(f'Similarity with "{sentence}": {sentence_score:.2f}')

        if score < self.threshold:
            outcome = MatchOutcome.below_threshold(score)
        else:
            outcome = MatchOutcome.matched(corpus.sentences[index], score)

        logger.log_match(query, outcome.status.value, score, duration_ms=(time.time() - start) * 1000)
        return outcome

    async def train_model(self, sentences: Sequence[str]) -> TrainOutcome:
        """Train and report success or failure without raising."""
        try:
            corpus = await self.train(sentences)
        except (SemanticMatchError, OSError, TypeError) as e:
            logger.error(f"Training error: {e}")
            return TrainOutcome(False, str(e) or "Training failed.")

        return TrainOutcome(True, "Model trained successfully.", len(corpus), corpus.failed)

    async def test_sentence(self, sentence: str) -> Dict[str, Any]:
        """Match ``sentence`` and return the ``{bestMatch, bestScore}`` payload."""
        outcome = await self.match(sentence)
        return outcome.to_response()

    def status(self) -> Dict[str, Any]:
        """Snapshot of the service state."""
        return {
            "model_loaded": self.embedder.is_loaded,
            "model_name": self.embedder.provider.name,
            "corpus_size": len(self.index),
            "threshold": self.threshold,
            "training_file": str(self.store.path),
            "training_file_exists": self.store.exists(),
        }


_service: Optional[SemanticMatchService] = None


def get_service() -> SemanticMatchService:
    """Get the process-wide service, constructing it from config on first use."""
    global _service
    if _service is None:
        _service = SemanticMatchService()
    return _service


def reset_service() -> None:
    """Drop the process-wide service."""
    global _service
    _service = None


async def train_model(sentences: List[str]) -> TrainOutcome:
    """Train the process-wide service."""
    return await get_service().train_model(sentences)


async def test_sentence(sentence: str) -> Dict[str, Any]:
    """Match against the process-wide service."""
    return await get_service().test_sentence(sentence)
