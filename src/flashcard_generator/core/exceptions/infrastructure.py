"""Typed errors raised by the OpenRouter completion client."""

from typing import Any

from .base import OpenRouterError


class OpenRouterConfigError(OpenRouterError):
    """Raised when the client configuration is invalid."""

    default_code = "OPENROUTER_CONFIG_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details)


class OpenRouterAuthenticationError(OpenRouterError):
    """Raised on 401/403 responses."""

    default_code = "OPENROUTER_AUTH_ERROR"

    def __init__(self, message: str, status_code: int, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=status_code, details=details)


class OpenRouterValidationError(OpenRouterError):
    """Raised when a request is rejected, either before sending or by the server (400, 413, 422)."""

    default_code = "OPENROUTER_VALIDATION_ERROR"

    def __init__(self, message: str, status_code: int = 400, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=status_code, details=details)


class OpenRouterRateLimitError(OpenRouterError):
    """Raised when 429 responses persist after all retries."""

    default_code = "OPENROUTER_RATE_LIMIT"

    def __init__(self, message: str, retry_after: int | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=429, details=details)
        self.retry_after = retry_after


class OpenRouterModelNotFoundError(OpenRouterError):
    """Raised on 404 responses for the requested model."""

    default_code = "OPENROUTER_MODEL_NOT_FOUND"

    def __init__(self, message: str, requested_model: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=404, details=details)
        self.requested_model = requested_model


class OpenRouterServiceError(OpenRouterError):
    """Raised when the service keeps failing with 5xx or returns an unexpected status."""

    default_code = "OPENROUTER_SERVICE_ERROR"

    def __init__(self, message: str, status_code: int, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=status_code, details=details)


class OpenRouterNetworkError(OpenRouterError):
    """Raised when no response could be obtained from the service."""

    default_code = "OPENROUTER_NETWORK_ERROR"

    def __init__(self, message: str, cause: BaseException | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details)
        self.cause = cause


class OpenRouterParseError(OpenRouterError):
    """Raised when a successful response does not have the expected shape."""

    default_code = "OPENROUTER_PARSE_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details)


class OpenRouterTimeoutError(OpenRouterError):
    """Raised when every attempt timed out."""

    default_code = "OPENROUTER_TIMEOUT"

    def __init__(self, message: str, timeout_ms: int, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details={"timeout_ms": timeout_ms, **(details or {})})
        self.timeout_ms = timeout_ms


class OpenRouterInsufficientCreditsError(OpenRouterError):
    """Raised on 402 responses."""

    default_code = "OPENROUTER_INSUFFICIENT_CREDITS"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=402, details=details)
