"""
Pytest configuration and shared fixtures for flashcard generator tests.

Provides a scripted ``httpx.MockTransport`` so the OpenRouter client can be
exercised without network access, and a recording sleep so backoff delays
can be asserted without waiting.
"""

import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest

# Keep a developer's real key out of the test run
os.environ.pop("OPENROUTER_API_KEY", None)
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "INFO"

from flashcard_generator.infrastructure.llm.clients.openrouter_client import OpenRouterClient  # noqa: E402
from flashcard_generator.infrastructure.llm.models import ClientConfig  # noqa: E402
from tests.fixtures.sample_responses import TEST_API_KEY  # noqa: E402
from tests.fixtures.transport import RecordingSleep  # noqa: E402


@pytest.fixture
def api_key() -> str:
    """API key used by every test client."""
    return TEST_API_KEY


@pytest.fixture
def client_config() -> ClientConfig:
    """Client configuration with short retry delays."""
    return ClientConfig(api_key=TEST_API_KEY, max_retries=3, retry_delay_ms=100, timeout_ms=10_000)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Sleep replacement recording backoff delays in seconds."""
    return RecordingSleep()


@pytest.fixture
def make_client(client_config: ClientConfig, recording_sleep: RecordingSleep) -> Callable[..., OpenRouterClient]:
    """Build an OpenRouter client whose transport is the given handler."""

    def _make(handler: Callable[[httpx.Request], Any], **overrides: Any) -> OpenRouterClient:
        config = ClientConfig(**{**client_config.model_dump(), "api_key": TEST_API_KEY, **overrides})
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return OpenRouterClient(config, http_client=http_client, sleep=recording_sleep)

    return _make


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: slow running test")
