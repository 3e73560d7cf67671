"""Base exception class for the flashcard generator."""

from typing import Any


class OpenRouterError(Exception):
    """Base exception for all completion client errors.

    Every error carries a stable machine-readable ``code`` so callers can
    branch on it without matching message text.
    """

    default_code = "OPENROUTER_UNKNOWN_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.status_code = status_code
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.details:
            return f"{self.message}. Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for structured logging."""
        return {
            "error_type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }
