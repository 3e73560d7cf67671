"""Flashcard client implementations."""

from .base_client import BaseFlashcardClient
from .mock_client import MockConfig, MockFlashcardClient
from .openrouter_client import MODELS_CACHE_TTL_SECONDS, OpenRouterClient

__all__ = [
    "BaseFlashcardClient",
    "OpenRouterClient",
    "MODELS_CACHE_TTL_SECONDS",
    "MockFlashcardClient",
    "MockConfig",
]
