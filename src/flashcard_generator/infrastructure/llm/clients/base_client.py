"""Base flashcard client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import TracebackType
from typing import Any

from ..models import FlashcardCandidate, FlashcardGenerationOptions, ModelInfo


class BaseFlashcardClient(ABC):
    """Abstract base class for clients that turn text into flashcards."""

    def __init__(self, name: str):
        """Initialize the client.

        Args:
            name: Human-readable name for this client
        """
        self.name = name

    @abstractmethod
    async def generate_flashcards(
        self,
        input_text: str,
        options: FlashcardGenerationOptions | Mapping[str, Any] | None = None,
    ) -> list[FlashcardCandidate]:
        """Generate validated flashcard candidates from source text.

        Args:
            input_text: Text to turn into flashcards
            options: Generation options

        Returns:
            Validated candidates in the order the model produced them

        Raises:
            OpenRouterError: If generation fails
        """

    @abstractmethod
    async def list_models(self) -> list[ModelInfo]:
        """List models available to this client."""

    @abstractmethod
    async def validate_api_key(self) -> bool:
        """Check whether the configured credentials are accepted."""

    async def aclose(self) -> None:
        """Release resources held by the client."""

    async def __aenter__(self) -> BaseFlashcardClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
