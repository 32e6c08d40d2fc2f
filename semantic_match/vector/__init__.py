"""
Embeddings, corpus types and cosine similarity search.
"""

# Package initialization for vector module
from .index import CorpusIndex, cosine_similarity, cosine_scores, best_match
from .types import TrainedCorpus, MatchOutcome, MatchStatus, ReadyState, TrainOutcome
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding, Embedder

__all__ = [
    'CorpusIndex',
    'cosine_similarity',
    'cosine_scores',
    'best_match',
    'TrainedCorpus',
    'MatchOutcome',
    'MatchStatus',
    'ReadyState',
    'TrainOutcome',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'Embedder'
]
