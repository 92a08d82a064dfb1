"""Error types for the generative-image integration and provider error mapping."""

from __future__ import annotations

from dataclasses import dataclass


class GenerationError(RuntimeError):
    """A failure that should be reported to the HTTP client with ``status_code``."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.status_code = status_code
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(GenerationError):
    """Raised when provider credentials are missing."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=500)


class ProviderRequestError(RuntimeError):
    """Raised when the provider rejects a request or cannot be reached in time."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ProviderNetworkError(RuntimeError):
    """Raised when the provider cannot be reached at all."""


@dataclass(frozen=True, slots=True)
class _ErrorRule:
    markers: tuple[str, ...]
    status_code: int
    message: str


# Evaluated top to bottom; the first rule with a marker in the provider message wins.
PROVIDER_ERROR_RULES: tuple[_ErrorRule, ...] = (
    _ErrorRule(
        ("quota", "QUOTA_EXCEEDED"),
        429,
        "API quota exceeded. Please try again later or check your Google AI API quota.",
    ),
    _ErrorRule(
        ("safety", "SAFETY"),
        400,
        "Content was blocked by safety filters. Please try different images.",
    ),
    _ErrorRule(
        ("invalid", "INVALID_ARGUMENT"),
        400,
        "Invalid request. Please check your images and try again.",
    ),
    _ErrorRule(
        ("permission", "PERMISSION_DENIED"),
        403,
        "API permission denied. Please check your API key configuration.",
    ),
    _ErrorRule(
        ("timeout", "DEADLINE_EXCEEDED"),
        504,
        "Request timed out. The API is taking too long to respond. Please try again.",
    ),
)


def classify_provider_error(message: str | None) -> GenerationError:
    """Translate a provider error message into a client-facing error."""

    message = message or "Unknown API error"
    for rule in PROVIDER_ERROR_RULES:
        if any(marker in message for marker in rule.markers):
            return GenerationError(rule.message, status_code=rule.status_code)
    return GenerationError(f"API error: {message}. Please try again later.", status_code=500)


SAFETY_BLOCKED = PROVIDER_ERROR_RULES[1].message
NO_CANDIDATES = (
    "No response from AI model. The model may be unavailable or the request was blocked. "
    "Please try again."
)
NETWORK_ERROR = "Network error. Please check your connection and try again."
