"""OpenRouter completion client with retries, timeouts and typed errors."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from ....core.exceptions import (
    OpenRouterAuthenticationError,
    OpenRouterError,
    OpenRouterInsufficientCreditsError,
    OpenRouterModelNotFoundError,
    OpenRouterNetworkError,
    OpenRouterParseError,
    OpenRouterRateLimitError,
    OpenRouterServiceError,
    OpenRouterTimeoutError,
    OpenRouterValidationError,
)
from ....core.redaction import redact_secrets
from ..flashcards import (
    DEFAULT_TEMPERATURE,
    MAX_OUTPUT_TOKENS,
    build_response_format,
    build_system_prompt,
    build_user_prompt,
    extract_flashcards,
    prepare_input_text,
)
from ..models import (
    ClientConfig,
    CompletionOptions,
    CompletionResult,
    FlashcardCandidate,
    FlashcardGenerationOptions,
    ModelCapabilities,
    ModelInfo,
    ModelPricing,
)
from ..parsing import parse_response
from ..resilience.retry import RetryPolicy, SleepFunc
from .base_client import BaseFlashcardClient

logger = structlog.get_logger(__name__)

MODELS_CACHE_TTL_SECONDS = 3600

# CompletionOptions field -> wire field
_SAMPLING_PARAMETERS = (
    ("temperature", "temperature"),
    ("max_tokens", "max_tokens"),
    ("top_p", "top_p"),
    ("top_k", "top_k"),
    ("frequency_penalty", "frequency_penalty"),
    ("presence_penalty", "presence_penalty"),
)


class _TransientFailure(Exception):
    """An attempt failed in a way that may succeed on retry."""

    def __init__(
        self,
        reason: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        retry_after: int | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code
        self.body = body
        self.retry_after = retry_after
        self.cause = cause


@dataclass(frozen=True)
class _ModelsCache:
    models: tuple[ModelInfo, ...]
    fetched_at: float

    def is_fresh(self, now: float) -> bool:
        return now - self.fetched_at < MODELS_CACHE_TTL_SECONDS


def _parse_retry_after(value: str | None) -> int | None:
    """Whole seconds from a delta-seconds ``Retry-After`` header.

    Fractional values are truncated. HTTP-date values are not interpreted and
    yield None.
    """
    if value is None:
        return None
    try:
        return int(float(value.strip()))
    except (ValueError, OverflowError):
        return None


def _safe_json(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {"body": payload}


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _flag(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key)
    return value if isinstance(value, bool) else default


def _to_model_info(raw: Any) -> ModelInfo:
    if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
        raise OpenRouterParseError("Model list entry is missing an id", {"model": raw})

    pricing = raw.get("pricing") if isinstance(raw.get("pricing"), dict) else {}
    return ModelInfo(
        id=raw["id"],
        name=raw.get("name") or raw["id"],
        description=raw.get("description") or "",
        pricing=ModelPricing(
            prompt=_to_float(pricing.get("prompt", 0)),
            completion=_to_float(pricing.get("completion", 0)),
        ),
        context_length=_to_int(raw.get("context_length", 0)),
        supports=ModelCapabilities(
            streaming=_flag(raw, "supports_streaming", False),
            function_calling=_flag(raw, "supports_function_calling", False),
            json_mode=_flag(raw, "supports_json_mode", True),
        ),
    )


class OpenRouterClient(BaseFlashcardClient):
    """Client for the OpenRouter chat completions API.

    Turns the unreliable, rate-limited HTTP API into a single awaitable
    operation that either returns a parsed result or raises exactly one
    ``OpenRouterError`` subclass.
    """

    def __init__(
        self,
        config: ClientConfig | Mapping[str, Any],
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFunc | None = None,
    ):
        """Initialize OpenRouter client.

        No network I/O happens here.

        Args:
            config: Client configuration, validated if given as a mapping
            http_client: Transport to use; the client closes only transports it created
            sleep: Awaitable used for backoff delays, defaults to asyncio.sleep

        Raises:
            OpenRouterConfigError: If the configuration is invalid
        """
        super().__init__("OpenRouter")
        self.config = config if isinstance(config, ClientConfig) else ClientConfig(**config)
        self._http = http_client or httpx.AsyncClient()
        self._owns_http = http_client is None
        self._sleep = sleep
        self._models_cache: _ModelsCache | None = None

        logger.info("OpenRouter client initialized", **self.config.redacted())

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def build_request(self, options: CompletionOptions | Mapping[str, Any]) -> dict[str, Any]:
        """Build the wire payload for a completion call.

        Pure: performs no I/O. Sampling parameters are included only when set.

        Raises:
            OpenRouterValidationError: If any option is out of range
        """
        opts = options if isinstance(options, CompletionOptions) else CompletionOptions(**options)

        messages: list[dict[str, str]] = []
        system_message = opts.system_message or self.config.default_system_message
        if system_message:
            messages.append({"role": "system", "content": system_message})
        messages.extend(message.model_dump() for message in opts.messages)

        request: dict[str, Any] = {
            "model": opts.model or self.config.default_model,
            "messages": messages,
        }

        if opts.response_format is not None:
            request["response_format"] = opts.response_format.to_wire()

        for field_name, wire_name in _SAMPLING_PARAMETERS:
            value = getattr(opts, field_name)
            if value is not None:
                request[wire_name] = value

        return request

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }
        if self.config.http_referer:
            headers["HTTP-Referer"] = self.config.http_referer
        if self.config.app_title:
            headers["X-Title"] = self.config.app_title
        return headers

    def _sanitize(self, error: BaseException) -> str:
        message = str(error) or type(error).__name__
        return redact_secrets(message, self.config.api_key.get_secret_value())

    # ------------------------------------------------------------------
    # HTTP execution
    # ------------------------------------------------------------------

    async def execute_request(self, request: dict[str, Any], timeout_ms: int, max_retries: int) -> dict[str, Any]:
        """POST the request, retrying transient failures with exponential backoff.

        Args:
            request: Wire payload from ``build_request``
            timeout_ms: Per-attempt timeout in milliseconds
            max_retries: Retries allowed after the first attempt

        Returns:
            Decoded response envelope

        Raises:
            OpenRouterError: Exactly one typed error describing the final outcome
        """
        policy = RetryPolicy(max_retries=max_retries, base_delay_ms=self.config.retry_delay_ms, sleep=self._sleep)
        attempt_index = 0

        while True:
            try:
                return await self._send_once(request, timeout_ms)
            except _TransientFailure as failure:
                if not policy.can_retry(attempt_index):
                    raise self._exhausted_error(failure, attempt_index + 1, timeout_ms) from failure.cause

                logger.warning(
                    "OpenRouter request failed, retrying",
                    reason=failure.reason,
                    status_code=failure.status_code,
                    attempt=attempt_index + 1,
                    max_attempts=policy.max_attempts,
                    delay_ms=policy.backoff_ms(attempt_index),
                )
                await policy.wait(attempt_index, failure.reason)
                attempt_index += 1

    async def _send_once(self, request: dict[str, Any], timeout_ms: int) -> dict[str, Any]:
        timeout_seconds = timeout_ms / 1000
        try:
            async with asyncio.timeout(timeout_seconds):
                response = await self._http.post(
                    self.config.base_url,
                    json=request,
                    headers=self._headers(),
                    timeout=timeout_seconds,
                )
        except (TimeoutError, httpx.TimeoutException) as e:
            raise _TransientFailure("timeout", cause=e) from e
        except httpx.RequestError as e:
            raise _TransientFailure("network", cause=e) from e

        return self._handle_response(response, request["model"])

    def _handle_response(self, response: httpx.Response, model: str) -> dict[str, Any]:
        status = response.status_code

        if status in (401, 403):
            raise OpenRouterAuthenticationError(
                "Invalid API key or insufficient permissions", status, details=_safe_json(response)
            )

        if status == 402:
            raise OpenRouterInsufficientCreditsError(
                "Insufficient credits on the OpenRouter account", details=_safe_json(response)
            )

        if status in (400, 413, 422):
            body = _safe_json(response)
            error = body.get("error")
            reason = error.get("message") if isinstance(error, dict) else None
            raise OpenRouterValidationError(
                f"Request rejected: {reason or response.reason_phrase}", status, details=body
            )

        if status == 404:
            raise OpenRouterModelNotFoundError(
                f"Model not found: {model}. Check available models with list_models()",
                model,
                details=_safe_json(response),
            )

        if status == 429:
            raise _TransientFailure(
                "rate_limit",
                status_code=status,
                retry_after=_parse_retry_after(response.headers.get("Retry-After")),
            )

        if status >= 500:
            raise _TransientFailure("server_error", status_code=status, body=response.text)

        if not response.is_success:
            raise OpenRouterServiceError(f"Unexpected HTTP status: {status}", status, details={"body": response.text})

        try:
            payload = response.json()
        except ValueError as e:
            raise OpenRouterParseError("API response body is not valid JSON", {"body": response.text}) from e

        if not isinstance(payload, dict):
            raise OpenRouterParseError("API response body is not a JSON object", {"body": payload})
        return payload

    def _exhausted_error(self, failure: _TransientFailure, attempts: int, timeout_ms: int) -> OpenRouterError:
        if failure.reason == "rate_limit":
            return OpenRouterRateLimitError(
                "Rate limit exceeded and retries exhausted",
                failure.retry_after,
                details={"attempts": attempts},
            )

        if failure.reason == "server_error":
            return OpenRouterServiceError(
                f"OpenRouter service error ({failure.status_code}) after {attempts} attempts",
                failure.status_code or 500,
                details={"body": failure.body, "attempts": attempts},
            )

        if failure.reason == "timeout":
            return OpenRouterTimeoutError(
                f"Request timed out after {timeout_ms}ms", timeout_ms, details={"attempts": attempts}
            )

        cause = failure.cause
        return OpenRouterNetworkError(
            f"Network error: {self._sanitize(cause) if cause else 'unknown'}",
            cause,
            details={"attempts": attempts},
        )

    def parse_response(self, envelope: dict[str, Any], requested_model: str | None = None) -> CompletionResult[Any]:
        """Parse a decoded response envelope; see ``parsing.parse_response``."""
        return parse_response(envelope, requested_model=requested_model)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def complete(self, options: CompletionOptions | Mapping[str, Any]) -> CompletionResult[Any]:
        """Run a chat completion and parse the result.

        Args:
            options: Completion options; mappings are validated first

        Returns:
            Parsed completion result

        Raises:
            OpenRouterValidationError: If the options are invalid (no request is sent)
            OpenRouterError: For any transport, server or parse failure
        """
        start_time = time.perf_counter()

        opts = options if isinstance(options, CompletionOptions) else CompletionOptions(**options)
        request = self.build_request(opts)
        timeout_ms = opts.timeout_ms if opts.timeout_ms is not None else self.config.timeout_ms
        max_retries = opts.max_retries if opts.max_retries is not None else self.config.max_retries

        envelope = await self.execute_request(request, timeout_ms, max_retries)
        result = self.parse_response(envelope, requested_model=request["model"])

        processing_time_ms = int((time.perf_counter() - start_time) * 1000)
        result = result.model_copy(
            update={"metadata": result.metadata.model_copy(update={"processing_time_ms": processing_time_ms})}
        )

        logger.info(
            "OpenRouter completion finished",
            model=result.model,
            finish_reason=result.finish_reason,
            prompt_tokens=result.usage.prompt_tokens,
            completion_tokens=result.usage.completion_tokens,
            total_tokens=result.usage.total_tokens,
            processing_time_ms=processing_time_ms,
        )
        return result

    async def generate_flashcards(
        self,
        input_text: str,
        options: FlashcardGenerationOptions | Mapping[str, Any] | None = None,
    ) -> list[FlashcardCandidate]:
        """Generate flashcards from source text.

        Invalid candidates are dropped; a result with fewer cards than
        ``min_flashcards`` still succeeds as long as at least one survives.

        Raises:
            OpenRouterValidationError: If the text or options are invalid
            OpenRouterParseError: If the model returned no usable flashcards
            OpenRouterError: For transport and server failures
        """
        text = prepare_input_text(input_text)
        if options is None:
            opts = FlashcardGenerationOptions()
        elif isinstance(options, FlashcardGenerationOptions):
            opts = options
        else:
            opts = FlashcardGenerationOptions(**options)

        result = await self.complete(
            CompletionOptions(
                system_message=build_system_prompt(opts.min_flashcards, opts.max_flashcards, opts.content_language),
                messages=[
                    {"role": "user", "content": build_user_prompt(text, opts.min_flashcards, opts.max_flashcards)}
                ],
                model=opts.model,
                temperature=opts.temperature if opts.temperature is not None else DEFAULT_TEMPERATURE,
                max_tokens=MAX_OUTPUT_TOKENS,
                response_format=build_response_format(opts.min_flashcards, opts.max_flashcards),
                timeout_ms=opts.timeout_ms,
            )
        )

        return extract_flashcards(result.content, opts.min_flashcards)

    async def list_models(self) -> list[ModelInfo]:
        """Return available models, cached for one hour.

        Concurrent callers during a refresh may each fetch; the last fetch wins.
        """
        cache = self._models_cache
        if cache is not None and cache.is_fresh(time.time()):
            logger.debug("Returning models from cache", count=len(cache.models))
            return list(cache.models)

        models = await self._fetch_models()
        self._models_cache = _ModelsCache(models=tuple(models), fetched_at=time.time())
        logger.info("Fetched model list", count=len(models))
        return models

    def clear_models_cache(self) -> None:
        """Drop the cached model list."""
        self._models_cache = None

    async def _fetch_models(self) -> list[ModelInfo]:
        timeout_ms = self.config.timeout_ms
        timeout_seconds = timeout_ms / 1000
        try:
            async with asyncio.timeout(timeout_seconds):
                response = await self._http.get(
                    self.config.models_url,
                    headers={"Authorization": f"Bearer {self.config.api_key.get_secret_value()}"},
                    timeout=timeout_seconds,
                )
        except (TimeoutError, httpx.TimeoutException) as e:
            raise OpenRouterTimeoutError(f"Model list request timed out after {timeout_ms}ms", timeout_ms) from e
        except httpx.RequestError as e:
            raise OpenRouterNetworkError(f"Failed to fetch model list: {self._sanitize(e)}", e) from e

        if response.status_code in (401, 403):
            raise OpenRouterAuthenticationError(
                "Invalid API key or insufficient permissions", response.status_code, details=_safe_json(response)
            )
        if not response.is_success:
            raise OpenRouterServiceError(
                f"Failed to fetch model list: {response.reason_phrase}", response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise OpenRouterParseError("Model list response is not valid JSON", {"body": response.text}) from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise OpenRouterParseError("Model list response does not contain a data array", {"data": payload})

        return [_to_model_info(raw) for raw in data]

    async def validate_api_key(self) -> bool:
        """Probe authentication with a minimal one-token completion.

        Returns:
            True if the key is accepted (even without credits), False on an authentication error

        Raises:
            OpenRouterError: Any other failure, unchanged
        """
        try:
            await self.complete({"messages": [{"role": "user", "content": "test"}], "max_tokens": 1, "temperature": 0})
        except OpenRouterAuthenticationError:
            return False
        except OpenRouterInsufficientCreditsError:
            return True
        return True

    async def aclose(self) -> None:
        """Close the HTTP transport if this client created it."""
        if self._owns_http:
            await self._http.aclose()
