"""Structured logging utility for the semantic match engine."""

import logging
import os
import sys
from typing import Dict, Any, Optional


class StructuredLogger:
    """Structured logger with consistent formatting."""

    def __init__(self, name: str = "semantic_match", level: int = logging.INFO):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Create console handler with structured format
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setLevel(logging.DEBUG)
            formatter = logging.Formatter(
                '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str = "success",
                      duration_ms: Optional[float] = None,
                      details: Optional[Dict[str, Any]] = None):
        """Log structured operation with status and timing."""
        message_parts = [f"operation={operation}", f"status={status}"]

        if duration_ms is not None:
            message_parts.append(f"duration_ms={duration_ms:.2f}")

        if details:
            detail_str = " ".join([f"{k}={v}" for k, v in details.items()])
            message_parts.append(detail_str)

        message = " | ".join(message_parts)

        if status == "success":
            self.logger.info(message)
        elif status in ("error", "failed"):
            self.logger.error(message)
        else:
            self.logger.warning(message)

    def log_model_load(self, model_name: str, dimension: int = None,
                       status: str = "success", duration_ms: float = None,
                       error: str = None):
        """Log embedding model loading."""
        details = {"model": model_name}
        if dimension is not None:
            details["dimension"] = dimension
        if error:
            details["error"] = error

        self.log_operation("model_load", status, duration_ms, details)

    def log_training(self, sentence_count: int, failed_count: int = 0,
                     status: str = "success", duration_ms: float = None,
                     generation: int = None):
        """Log a training run over a sentence corpus."""
        details = {"sentences": sentence_count, "failed_embeddings": failed_count}
        if generation is not None:
            details["generation"] = generation

        self.log_operation("train", status, duration_ms, details)

    def log_embedding_failure(self, text: str, error: str):
        """Log a single embedding that was degraded to the zero vector."""
        preview = text[:50] + "..." if len(text) > 50 else text
        self.log_operation("embed", "degraded", details={"text": repr(preview), "error": error})

    def log_match(self, query: str, status: str, best_score: float = None,
                  duration_ms: float = None):
        """Log the outcome of a match query."""
        preview = query[:50] + "..." if len(query) > 50 else query
        details = {"query": repr(preview), "outcome": status}
        if best_score is not None:
            details["best_score"] = f"{best_score:.4f}"

        self.log_operation("match", "success", duration_ms, details)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger(
    level=logging.DEBUG if os.getenv("DEBUG", "false").lower() == "true" else logging.INFO
)
