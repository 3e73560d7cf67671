"""Core exception classes for the flashcard generator.

Errors form a closed hierarchy rooted at ``OpenRouterError``; each subclass
carries a stable ``code`` and, where relevant, the HTTP status that caused it.
"""

from .base import OpenRouterError
from .infrastructure import (
    OpenRouterAuthenticationError,
    OpenRouterConfigError,
    OpenRouterInsufficientCreditsError,
    OpenRouterModelNotFoundError,
    OpenRouterNetworkError,
    OpenRouterParseError,
    OpenRouterRateLimitError,
    OpenRouterServiceError,
    OpenRouterTimeoutError,
    OpenRouterValidationError,
)
from .messages import DEFAULT_USER_MESSAGE, get_user_friendly_message

__all__ = [
    # Base exception
    "OpenRouterError",
    # Client exceptions
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
    # User-facing messages
    "DEFAULT_USER_MESSAGE",
    "get_user_friendly_message",
]
