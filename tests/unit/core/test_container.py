"""Tests for the dependency injection container."""

import pytest
from pydantic import SecretStr

from flashcard_generator.core.config import Settings
from flashcard_generator.core.container import create_container
from flashcard_generator.core.exceptions import OpenRouterConfigError
from flashcard_generator.infrastructure.llm.clients.mock_client import MockFlashcardClient
from flashcard_generator.infrastructure.llm.clients.openrouter_client import OpenRouterClient


class TestContainer:
    """Test cases for the composition root."""

    def test_provides_openrouter_client(self):
        """Test a configured key yields a real client."""
        container = create_container(Settings(_env_file=None, OPENROUTER_API_KEY=SecretStr("sk-or-v1-0123456789")))

        client = container.flashcard_client()

        assert isinstance(client, OpenRouterClient)

    def test_client_is_singleton_per_container(self):
        """Test the same client is returned on every call."""
        container = create_container(Settings(_env_file=None, OPENROUTER_API_KEY=SecretStr("sk-or-v1-0123456789")))

        assert container.flashcard_client() is container.flashcard_client()

    def test_separate_containers_are_isolated(self):
        """Test each container owns its own client."""
        settings = Settings(_env_file=None, OPENROUTER_API_KEY=SecretStr("sk-or-v1-0123456789"))

        assert create_container(settings).flashcard_client() is not create_container(settings).flashcard_client()

    def test_mock_client_when_allowed(self):
        """Test mock mode yields the mock client when allowed."""
        container = create_container(Settings(_env_file=None, ALLOW_MOCK_CLIENT=True))

        assert isinstance(container.flashcard_client(), MockFlashcardClient)

    def test_missing_key_without_mock(self):
        """Test mock mode fails fast when mocks are not allowed."""
        container = create_container(Settings(_env_file=None, ALLOW_MOCK_CLIENT=False))

        with pytest.raises(OpenRouterConfigError):
            container.flashcard_client()
