"""Integration check helpers."""

from .checks import (
    CHECKS,
    IntegrationCheckResult,
    check_gemini,
    check_vectorizer,
    run_all_checks,
)

__all__ = [
    "CHECKS",
    "IntegrationCheckResult",
    "check_gemini",
    "check_vectorizer",
    "run_all_checks",
]
