"""
Embedding providers and the async embedder used by training and matching.
Providers are synchronous wrappers around a model; the Embedder owns the
load lifecycle and the degrade-to-zero-vector policy.
"""

from abc import ABC, abstractmethod
import asyncio
from concurrent.futures import ThreadPoolExecutor
import hashlib
import os
import time
from typing import Optional

import numpy as np
from sentence_transformers import SentenceTransformer

from ..core.exceptions import ModelLoadError, EmbeddingError
from ..util.logging import logger


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    name = "provider"

    def load(self) -> None:
        """Initialize the underlying model. Providers without a model do nothing."""
        pass

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider for testing purposes.

    The SHA-256 digest of the text seeds a random generator that fills all
    dimensions, so identical strings always map to identical unit vectors and
    distinct strings are close to orthogonal.
    """

    name = "deterministic-hash"

    def __init__(self, dimension: int = 384):
        self.dimension = dimension

    def embed_text(self, text: str) -> list[float]:
        """Generate deterministic embedding vector using hash function."""
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        rng = np.random.default_rng(int.from_bytes(digest[:8], "big"))
        vector = rng.standard_normal(self.dimension)
        return (vector / np.linalg.norm(vector)).tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models.

    Defaults to all-MiniLM-L6-v2 (384 dimensions). Output is mean-pooled and
    L2-normalized.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        self.model_name = model_name
        self.name = model_name
        self._model = None
        self._dimension = None

    def load(self) -> None:
        if self._model is None:
            self._model = SentenceTransformer(self.model_name)

    @property
    def model(self):
        self.load()
        return self._model

    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector using sentence transformers."""
        embedding = self.model.encode(text, convert_to_numpy=True, normalize_embeddings=True)
        return embedding.tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            dimension = self.model.get_sentence_embedding_dimension()
            if dimension is None:
                # Some models only report it after encoding
                dimension = len(self.model.encode("test", convert_to_numpy=True))
            self._dimension = dimension
        return self._dimension


class Embedder:
    """
    Async adapter over an embedding provider.

    Loads the provider exactly once (Unloaded -> Loading -> Ready), runs
    embeddings in its own worker threads so many sentences can be embedded
    concurrently, and validates every vector against the provider dimension.

    At most ``max_workers`` embeddings run at once. Callers beyond that wait
    for a free worker before their timeout starts, so the timeout bounds a
    single provider call and never the time spent queued.
    """

    def __init__(self, provider: IEmbeddingProvider, timeout: Optional[float] = None,
                 max_workers: Optional[int] = None):
        """
        Args:
            provider: Embedding provider to wrap
            timeout: Per-embedding timeout in seconds, None for no timeout
            max_workers: Concurrent embedding calls, defaults to the
                ThreadPoolExecutor default
        """
        self.provider = provider
        self.timeout = timeout
        self.max_workers = max_workers or min(32, (os.cpu_count() or 1) + 4)
        self._dimension: Optional[int] = None
        self._load_lock: Optional[asyncio.Lock] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._slots: Optional[asyncio.Semaphore] = None
        self._slots_loop = None

    @property
    def is_loaded(self) -> bool:
        return self._dimension is not None

    @property
    def dimension(self) -> int:
        if self._dimension is None:
            raise ModelLoadError("Embedding model has not been loaded")
        return self._dimension

    async def ensure_loaded(self) -> None:
        """Load the provider once. Repeated calls are no-ops once loaded."""
        if self.is_loaded:
            return

        if self._load_lock is None:
            self._load_lock = asyncio.Lock()

        async with self._load_lock:
            if self.is_loaded:
                return

            start = time.time()
            try:
                await asyncio.to_thread(self.provider.load)
                dimension = await asyncio.to_thread(self.provider.get_dimension)
            except Exception as e:
                logger.log_model_load(self.provider.name, status="failed", error=str(e))
                raise ModelLoadError(f"Failed to load embedding model {self.provider.name}: {e}") from e

            if not isinstance(dimension, int) or dimension < 1:
                raise ModelLoadError(f"Embedding model {self.provider.name} reported invalid dimension {dimension!r}")

            self._dimension = dimension
            logger.log_model_load(self.provider.name, dimension,
                                  duration_ms=(time.time() - start) * 1000)

    def _worker_slots(self) -> asyncio.Semaphore:
        # Semaphores bind to one event loop; asyncio.run starts a new one each time
        loop = asyncio.get_running_loop()
        if self._slots is None or self._slots_loop is not loop:
            self._slots = asyncio.Semaphore(self.max_workers)
            self._slots_loop = loop
        return self._slots

    async def _run(self, text: str):
        """Call the provider in a worker thread, timing only the call itself."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers,
                                                thread_name_prefix="embed")

        slots = self._worker_slots()
        await slots.acquire()
        try:
            future = asyncio.get_running_loop().run_in_executor(
                self._executor, self.provider.embed_text, text)
        except BaseException:
            slots.release()
            raise

        def release(done):
            # A timed-out call keeps its worker until the provider returns
            slots.release()
            if not done.cancelled():
                done.exception()

        future.add_done_callback(release)

        if self.timeout:
            return await asyncio.wait_for(asyncio.shield(future), self.timeout)
        return await asyncio.shield(future)

    async def embed(self, text: str) -> np.ndarray:
        """
        Embed a single text.

        Raises:
            EmbeddingError: provider failure, timeout, or malformed vector
        """
        dimension = self.dimension

        try:
            raw = await self._run(text)
        except asyncio.TimeoutError as e:
            raise EmbeddingError(f"Embedding timed out after {self.timeout}s") from e
        except Exception as e:
            raise EmbeddingError(str(e) or type(e).__name__) from e

        try:
            vector = np.asarray(raw, dtype=np.float64).reshape(-1)
        except (TypeError, ValueError) as e:
            raise EmbeddingError(f"Invalid embedding for sentence: {text!r}") from e

        if vector.size != dimension:
            raise EmbeddingError(f"Invalid embedding for sentence: {text!r} "
                                 f"(expected {dimension} components, got {vector.size})")
        if not np.all(np.isfinite(vector)):
            raise EmbeddingError(f"Invalid embedding for sentence: {text!r} (non-finite values)")

        return vector

    async def embed_or_zero(self, text: str) -> tuple[np.ndarray, bool]:
        """Embed a text, degrading any failure to the zero vector.

        Returns:
            Tuple of (vector, ok) where ok is False for a degraded embedding
        """
        try:
            return await self.embed(text), True
        except EmbeddingError as e:
            logger.log_embedding_failure(text, str(e))
            return np.zeros(self.dimension, dtype=np.float64), False
