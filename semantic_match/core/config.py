"""Configuration management for the semantic match engine."""

import os
from dotenv import load_dotenv

load_dotenv()

# Persisted sentence list (JSON array of strings, overwritten on every train)
TRAINING_FILE = os.getenv("TRAINING_FILE", "./data/training.json")

# Minimum cosine similarity for a confident match
SIMILARITY_THRESHOLD = float(os.getenv("SIMILARITY_THRESHOLD", "0.3"))

# Embedding configuration
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "sentence-transformers")  # sentence-transformers|hash
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-MiniLM-L6-v2")
EMBED_DIM = int(os.getenv("EMBED_DIM", "384"))
EMBED_TIMEOUT_SEC = float(os.getenv("EMBED_TIMEOUT_SEC", "30"))  # 0 disables

# Debug flag
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Version string
VERSION = "0.1.0"


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    if EMBED_PROVIDER == "hash":
        from semantic_match.vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(dimension=EMBED_DIM)
    elif EMBED_PROVIDER == "sentence-transformers":
        from semantic_match.vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(EMBED_MODEL_NAME)
    else:
        raise ValueError(f"Unknown EMBED_PROVIDER: {EMBED_PROVIDER}")


def get_embed_timeout():
    """Get the per-embedding timeout in seconds, or None when disabled."""
    return EMBED_TIMEOUT_SEC if EMBED_TIMEOUT_SEC > 0 else None


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if EMBED_PROVIDER not in ["sentence-transformers", "hash"]:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if not -1.0 <= SIMILARITY_THRESHOLD <= 1.0:
        issues.append("SIMILARITY_THRESHOLD must be within [-1, 1]")

    if EMBED_DIM < 1:
        issues.append("EMBED_DIM must be >= 1")

    if EMBED_TIMEOUT_SEC < 0:
        issues.append("EMBED_TIMEOUT_SEC must be >= 0")

    return issues
