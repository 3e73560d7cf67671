"""LLM clients, request models and response handling."""

from .clients.base_client import BaseFlashcardClient
from .clients.mock_client import MockConfig, MockFlashcardClient
from .clients.openrouter_client import OpenRouterClient
from .factory import create_flashcard_client, is_openrouter_available
from .models import (
    CandidateRejection,
    ChatMessage,
    ClientConfig,
    CompletionMetadata,
    CompletionOptions,
    CompletionResult,
    FlashcardCandidate,
    FlashcardGenerationOptions,
    ModelCapabilities,
    ModelInfo,
    ModelPricing,
    ResponseFormat,
    TokenUsage,
)
from .resilience.retry import RetryAttempt, RetryPolicy

__all__ = [
    # Clients
    "BaseFlashcardClient",
    "OpenRouterClient",
    "MockFlashcardClient",
    "MockConfig",
    # Factory
    "create_flashcard_client",
    "is_openrouter_available",
    # Models
    "CandidateRejection",
    "ChatMessage",
    "ClientConfig",
    "CompletionMetadata",
    "CompletionOptions",
    "CompletionResult",
    "FlashcardCandidate",
    "FlashcardGenerationOptions",
    "ModelCapabilities",
    "ModelInfo",
    "ModelPricing",
    "ResponseFormat",
    "TokenUsage",
    # Resilience
    "RetryAttempt",
    "RetryPolicy",
]
