"""vectorizer.ai integration."""

from .client import (
    AccountStatus,
    VectorizeOptions,
    VectorizerClient,
    VectorizerError,
    VectorResult,
    api_mode,
    content_type_for,
)

__all__ = [
    "AccountStatus",
    "VectorResult",
    "VectorizeOptions",
    "VectorizerClient",
    "VectorizerError",
    "api_mode",
    "content_type_for",
]
