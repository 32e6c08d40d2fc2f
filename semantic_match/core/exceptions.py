"""Exceptions raised by the semantic match engine."""


class SemanticMatchError(Exception):
    """Base class for semantic match errors."""
    pass


class ModelLoadError(SemanticMatchError):
    """The embedding model could not be initialized. Fatal, never retried."""
    pass


class EmbeddingError(SemanticMatchError):
    """A single embedding could not be computed or was malformed."""
    pass


class EmptyCorpusError(SemanticMatchError, ValueError):
    """Training was requested with no sentences."""
    pass


class CorpusFileError(SemanticMatchError):
    """The persisted sentence list is unreadable or malformed."""
    pass
