"""Tests for model listing, caching and API key validation."""

import json

import httpx
import pytest
from freezegun import freeze_time

from flashcard_generator.core.exceptions import (
    OpenRouterAuthenticationError,
    OpenRouterNetworkError,
    OpenRouterParseError,
    OpenRouterServiceError,
)
from flashcard_generator.infrastructure.llm.clients.openrouter_client import MODELS_CACHE_TTL_SECONDS
from flashcard_generator.infrastructure.llm.models import DEFAULT_MODELS_URL
from tests.fixtures.sample_responses import MODELS_RESPONSE, TEST_API_KEY, make_envelope
from tests.fixtures.transport import ScriptedHandler


def models_response() -> httpx.Response:
    return httpx.Response(200, json=MODELS_RESPONSE)


class TestListModels:
    """Test cases for OpenRouterClient.list_models."""

    @pytest.mark.asyncio
    async def test_parses_models(self, make_client):
        """Test entries are mapped with numeric parsing and defaults."""
        handler = ScriptedHandler(models_response())
        client = make_client(handler)

        models = await client.list_models()

        request = handler.requests[0]
        assert request.method == "GET"
        assert str(request.url) == DEFAULT_MODELS_URL
        assert request.headers["Authorization"] == f"Bearer {TEST_API_KEY}"

        first, second = models
        assert first.id == "openai/gpt-4o-mini"
        assert first.name == "GPT-4o mini"
        assert first.pricing.prompt == pytest.approx(0.00000015)
        assert first.context_length == 128000
        assert first.supports.streaming is True
        assert first.supports.function_calling is True
        assert first.supports.json_mode is True

        assert second.name == "xiaomi/mimo-v2-flash:free"
        assert second.description == ""
        assert second.pricing.prompt == 0.0
        assert second.pricing.completion == 0.0
        assert second.context_length == 32768
        assert second.supports.streaming is False

    @pytest.mark.asyncio
    async def test_cache_expires_after_an_hour(self, make_client):
        """Test the list is served from cache until the TTL passes."""
        handler = ScriptedHandler(models_response())
        client = make_client(handler)

        with freeze_time("2026-01-01 12:00:00", real_asyncio=True) as frozen:
            first = await client.list_models()
            await client.list_models()
            assert handler.call_count == 1

            frozen.tick(MODELS_CACHE_TTL_SECONDS - 1)
            await client.list_models()
            assert handler.call_count == 1

            frozen.tick(2)
            second = await client.list_models()
            assert handler.call_count == 2

        assert first == second

    @pytest.mark.asyncio
    async def test_clear_cache(self, make_client):
        """Test clearing the cache forces a refetch."""
        handler = ScriptedHandler(models_response())
        client = make_client(handler)

        await client.list_models()
        client.clear_models_cache()
        await client.list_models()

        assert handler.call_count == 2

    @pytest.mark.asyncio
    async def test_cached_list_is_a_copy(self, make_client):
        """Test callers cannot mutate the cached snapshot."""
        client = make_client(ScriptedHandler(models_response()))

        models = await client.list_models()
        models.clear()

        assert len(await client.list_models()) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("response", "error_type"),
        [
            (httpx.Response(401), OpenRouterAuthenticationError),
            (httpx.Response(403), OpenRouterAuthenticationError),
            (httpx.Response(500), OpenRouterServiceError),
            (httpx.Response(429), OpenRouterServiceError),
            (httpx.Response(200, text="not json"), OpenRouterParseError),
            (httpx.Response(200, json={"models": []}), OpenRouterParseError),
            (httpx.Response(200, json={"data": [{"name": "no id"}]}), OpenRouterParseError),
        ],
    )
    async def test_errors_are_not_retried(self, make_client, response, error_type):
        """Test model listing fails after a single attempt."""
        handler = ScriptedHandler(response)
        client = make_client(handler)

        with pytest.raises(error_type):
            await client.list_models()

        assert handler.call_count == 1

    @pytest.mark.asyncio
    async def test_network_error(self, make_client):
        """Test transport failures are wrapped."""
        client = make_client(ScriptedHandler(httpx.ConnectError("connection refused")))

        with pytest.raises(OpenRouterNetworkError):
            await client.list_models()

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_nothing(self, make_client):
        """Test a failed fetch does not populate the cache."""
        handler = ScriptedHandler(httpx.Response(500), models_response())
        client = make_client(handler)

        with pytest.raises(OpenRouterServiceError):
            await client.list_models()

        assert len(await client.list_models()) == 2
        assert handler.call_count == 2


class TestValidateApiKey:
    """Test cases for OpenRouterClient.validate_api_key."""

    @pytest.mark.asyncio
    async def test_valid_key(self, make_client):
        """Test a successful probe returns True and costs one token."""
        handler = ScriptedHandler(httpx.Response(200, json=make_envelope("ok")))
        client = make_client(handler)

        assert await client.validate_api_key() is True

        body = json.loads(handler.requests[0].content)
        assert body["max_tokens"] == 1
        assert body["temperature"] == 0

    @pytest.mark.asyncio
    async def test_rejected_key(self, make_client):
        """Test an authentication failure returns False."""
        client = make_client(ScriptedHandler(httpx.Response(401)))

        assert await client.validate_api_key() is False

    @pytest.mark.asyncio
    async def test_key_without_credits(self, make_client):
        """Test a valid key on an empty account still counts as valid."""
        client = make_client(ScriptedHandler(httpx.Response(402)))

        assert await client.validate_api_key() is True

    @pytest.mark.asyncio
    async def test_other_failures_propagate(self, make_client):
        """Test unrelated failures are raised unchanged."""
        client = make_client(ScriptedHandler(httpx.Response(503)), max_retries=0)

        with pytest.raises(OpenRouterServiceError):
            await client.validate_api_key()
