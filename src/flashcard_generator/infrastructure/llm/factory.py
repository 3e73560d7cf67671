"""Factory for creating flashcard clients based on configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from ...core.exceptions import OpenRouterConfigError
from .clients.base_client import BaseFlashcardClient
from .clients.mock_client import MockConfig, MockFlashcardClient
from .clients.openrouter_client import OpenRouterClient

if TYPE_CHECKING:
    from ...core.config.config import Settings

logger = structlog.get_logger(__name__)


def is_openrouter_available(settings: Settings) -> bool:
    """Report whether a real OpenRouter API key is configured."""
    return not settings.is_mock_mode


def create_flashcard_client(
    settings: Settings,
    *,
    allow_mock: bool = False,
    http_client: httpx.AsyncClient | None = None,
) -> BaseFlashcardClient:
    """Create a flashcard client from settings.

    Args:
        settings: Application settings
        allow_mock: Return a mock client instead of failing when no key is configured
        http_client: Transport handed to the OpenRouter client

    Returns:
        Configured client

    Raises:
        OpenRouterConfigError: If no key is configured and mocks are not allowed,
            or if a configured value is invalid
    """
    if settings.is_mock_mode:
        if not allow_mock:
            raise OpenRouterConfigError(
                "OPENROUTER_API_KEY is not configured",
                details={"field": "OPENROUTER_API_KEY"},
            )
        logger.warning("No OpenRouter API key configured, using mock flashcard client")
        return MockFlashcardClient(MockConfig())

    client = OpenRouterClient(settings.client_config(), http_client=http_client)
    logger.info("Created flashcard client", client=client.name, model=client.config.default_model)
    return client
