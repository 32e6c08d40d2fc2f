"""Semantic sentence matching: train a corpus of reference sentences, match queries by cosine similarity."""

__version__ = "0.1.0"
