"""
Request and response models for the training and matching endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional, List


class TrainRequest(BaseModel):
    """Sentences to train the corpus with. Replaces any previous corpus."""
    sentences: List[str] = Field(default_factory=list)

class TrainResponse(BaseModel):
    message: str
    count: int
    failed: int = 0

class MatchRequest(BaseModel):
    sentence: str = ""

class MatchResponse(BaseModel):
    """Best match for a test sentence.

    bestMatch is None when nothing passed the threshold; bestScore is None
    as well when there was no training data or the sentence could not be
    embedded. status tells those cases apart.
    """
    bestMatch: Optional[str] = None
    bestScore: Optional[float] = None
    status: str

class HealthResponse(BaseModel):
    status: str
    version: str
    model_loaded: bool
    model_name: str
    corpus_size: int
    threshold: float
    training_file_exists: bool
