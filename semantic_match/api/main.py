"""
HTTP surface for training the corpus and testing sentences against it.
"""

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware

from .schemas import (
    TrainRequest,
    TrainResponse,
    MatchRequest,
    MatchResponse,
    HealthResponse,
)
from ..core.config import VERSION, debug_enabled
from ..core.exceptions import ModelLoadError
from ..core.match_service import SemanticMatchService, get_service

# Initialize the FastAPI application
app = FastAPI(
    title="Semantic Match API",
    version=VERSION,
    description="Train a corpus of reference sentences and match new sentences against it",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)

# Add CORS middleware to allow frontend connections
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint(service: SemanticMatchService = Depends(get_service)):
    """Check service health."""
    status = service.status()

    return HealthResponse(
        status="healthy",
        version=VERSION,
        model_loaded=status["model_loaded"],
        model_name=status["model_name"],
        corpus_size=status["corpus_size"],
        threshold=status["threshold"],
        training_file_exists=status["training_file_exists"],
    )


@app.post("/train", response_model=TrainResponse)
async def train_endpoint(request: TrainRequest, service: SemanticMatchService = Depends(get_service)):
    """Replace the trained corpus with the given sentences."""
    if not request.sentences:
        raise HTTPException(status_code=400, detail="No training sentences provided.")

    outcome = await service.train_model(request.sentences)
    if not outcome.success:
        raise HTTPException(status_code=500, detail=outcome.message or "Training failed due to server error.")

    return TrainResponse(message=outcome.message, count=outcome.count, failed=outcome.failed)


@app.post("/test", response_model=MatchResponse)
async def match_endpoint(request: MatchRequest, service: SemanticMatchService = Depends(get_service)):
    """Find the trained sentence that best matches the given one."""
    if not request.sentence.strip():
        raise HTTPException(status_code=400, detail="Missing sentence in request body.")

    try:
        outcome = await service.match(request.sentence)
    except ModelLoadError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return MatchResponse(
        bestMatch=outcome.best_match,
        bestScore=outcome.best_score,
        status=outcome.status.value,
    )
