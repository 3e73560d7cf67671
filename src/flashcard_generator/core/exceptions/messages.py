"""End-user wording for client error codes."""

from .base import OpenRouterError

_USER_MESSAGES: dict[str, str] = {
    "OPENROUTER_AUTH_ERROR": "Authentication failed. Check your API key.",
    "OPENROUTER_RATE_LIMIT": "Too many requests. Please try again in a moment.",
    "OPENROUTER_TIMEOUT": "The request timed out. Please try again.",
    "OPENROUTER_NETWORK_ERROR": "Network error. Check your connection and try again.",
    "OPENROUTER_MODEL_NOT_FOUND": "The model is unavailable. Choose a different model.",
    "OPENROUTER_INSUFFICIENT_CREDITS": "Insufficient credits. Top up your OpenRouter account.",
    "OPENROUTER_PARSE_ERROR": "The AI response could not be processed. Please try again.",
    "OPENROUTER_SERVICE_ERROR": "The AI service is temporarily unavailable. Please try again later.",
    "OPENROUTER_VALIDATION_ERROR": "Invalid request. Check your input and try again.",
}

DEFAULT_USER_MESSAGE = "An unexpected error occurred. Please try again."


def get_user_friendly_message(error: OpenRouterError) -> str:
    """Map an error to a message that is safe to show to end users."""
    return _USER_MESSAGES.get(error.code, DEFAULT_USER_MESSAGE)
