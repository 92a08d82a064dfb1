"""Generative-model client, prompts and error mapping."""

from .errors import ConfigurationError, GenerationError, classify_provider_error
from .gemini_client import GeminiClient, InlineImage
from .prompt_builder import BackgroundType, GarmentType, PromptBuilder

__all__ = [
    "BackgroundType",
    "ConfigurationError",
    "GarmentType",
    "GeminiClient",
    "GenerationError",
    "InlineImage",
    "PromptBuilder",
    "classify_provider_error",
]
