"""Shared fixtures: deterministic embedding providers and a service on a temp training file."""

import pytest

from semantic_match.core.match_service import SemanticMatchService
from semantic_match.vector.embeddings import DeterministicHashEmbedding


@pytest.fixture
def training_file(tmp_path):
    return tmp_path / "data" / "training.json"


@pytest.fixture
def hash_provider():
    return DeterministicHashEmbedding(dimension=384)


@pytest.fixture
def service(hash_provider, training_file):
    """Service backed by the deterministic hash provider."""
    return SemanticMatchService(provider=hash_provider, training_file=str(training_file),
                                threshold=0.3, embed_timeout=0)


@pytest.fixture
def make_service(training_file):
    """Factory for services over a given provider, sharing the temp training file."""
    def _make(provider, threshold=0.3, embed_timeout=0):
        return SemanticMatchService(provider=provider, training_file=str(training_file),
                                    threshold=threshold, embed_timeout=embed_timeout)
    return _make
