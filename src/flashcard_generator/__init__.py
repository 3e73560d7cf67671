"""Resilient OpenRouter completion client and flashcard generation."""

from .core.exceptions import (
    OpenRouterAuthenticationError,
    OpenRouterConfigError,
    OpenRouterError,
    OpenRouterInsufficientCreditsError,
    OpenRouterModelNotFoundError,
    OpenRouterNetworkError,
    OpenRouterParseError,
    OpenRouterRateLimitError,
    OpenRouterServiceError,
    OpenRouterTimeoutError,
    OpenRouterValidationError,
    get_user_friendly_message,
)
from .infrastructure.llm import (
    ClientConfig,
    CompletionOptions,
    CompletionResult,
    FlashcardCandidate,
    FlashcardGenerationOptions,
    MockFlashcardClient,
    ModelInfo,
    OpenRouterClient,
    create_flashcard_client,
)

__version__ = "1.0.0"

__all__ = [
    # Clients
    "OpenRouterClient",
    "MockFlashcardClient",
    "create_flashcard_client",
    # Models
    "ClientConfig",
    "CompletionOptions",
    "CompletionResult",
    "FlashcardCandidate",
    "FlashcardGenerationOptions",
    "ModelInfo",
    # Errors
    "OpenRouterError",
    "OpenRouterConfigError",
    "OpenRouterAuthenticationError",
    "OpenRouterValidationError",
    "OpenRouterRateLimitError",
    "OpenRouterModelNotFoundError",
    "OpenRouterServiceError",
    "OpenRouterNetworkError",
    "OpenRouterParseError",
    "OpenRouterTimeoutError",
    "OpenRouterInsufficientCreditsError",
    "get_user_friendly_message",
]
