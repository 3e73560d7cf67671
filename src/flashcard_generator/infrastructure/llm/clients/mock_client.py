"""Mock flashcard client for development and tests without an API key."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import BaseModel, Field

from ....core.exceptions import OpenRouterServiceError
from ..flashcards import prepare_input_text
from ..models import FlashcardCandidate, FlashcardGenerationOptions, ModelInfo
from .base_client import BaseFlashcardClient

logger = structlog.get_logger(__name__)

MOCK_FLASHCARDS: tuple[tuple[str, str], ...] = (
    ("What is TypeScript?", "A typed superset of JavaScript"),
    ("What is Astro?", "A modern web framework for content-focused websites"),
    ("What is Supabase?", "An open-source Firebase alternative"),
    ("What is a REST API?", "Representational State Transfer, an architectural style for APIs"),
    ("What is JWT?", "JSON Web Token, a compact way to transmit information securely"),
    ("What is rate limiting?", "Controlling the number of requests a user can make"),
    ("What is SHA-256?", "A cryptographic hash function producing 256-bit output"),
    ("What is Zod?", "A TypeScript-first schema validation library"),
)


class MockConfig(BaseModel):
    """Configuration for Mock client."""

    default_model: str = "mock-flashcards"
    simulate_delay: bool = False
    delay_ms: int = Field(default=2000, ge=0)
    failure_rate: float = Field(default=0.0, ge=0.0, le=1.0)  # 0.0 = no failures, 1.0 = always fail


class MockFlashcardClient(BaseFlashcardClient):
    """Flashcard client that returns canned cards without network access."""

    def __init__(self, config: MockConfig | None = None):
        """Initialize Mock client.

        Args:
            config: Mock configuration
        """
        super().__init__("Mock")
        self.config = config or MockConfig()

    async def generate_flashcards(
        self,
        input_text: str,
        options: FlashcardGenerationOptions | Mapping[str, Any] | None = None,
    ) -> list[FlashcardCandidate]:
        """Return canned flashcards after validating input like the real client.

        Raises:
            OpenRouterValidationError: If the text or options are invalid
            OpenRouterServiceError: If a failure is simulated
        """
        prepare_input_text(input_text)
        if options is None:
            opts = FlashcardGenerationOptions()
        elif isinstance(options, FlashcardGenerationOptions):
            opts = options
        else:
            opts = FlashcardGenerationOptions(**options)

        if self.config.simulate_delay:
            await asyncio.sleep(self.config.delay_ms / 1000)

        if self.config.failure_rate > 0 and random.random() < self.config.failure_rate:
            raise OpenRouterServiceError("Mock client simulated failure", 503)

        flashcards = [FlashcardCandidate(front=front, back=back) for front, back in MOCK_FLASHCARDS]
        logger.info("Returning mock flashcards", count=min(len(flashcards), opts.max_flashcards))
        return flashcards[: opts.max_flashcards]

    async def list_models(self) -> list[ModelInfo]:
        """Return the single mock model."""
        return [ModelInfo(id=self.config.default_model, name="Mock flashcard model", description="Canned responses")]

    async def validate_api_key(self) -> bool:
        """Mock mode has no key to validate; always True."""
        return True

    def set_failure_rate(self, rate: float) -> None:
        """Set the failure simulation rate.

        Args:
            rate: Failure rate, clamped to [0.0, 1.0]
        """
        self.config = self.config.model_copy(update={"failure_rate": max(0.0, min(1.0, rate))})
