"""Parsing of the provider's chat completion envelope."""

from __future__ import annotations

import json
import math
import re
from typing import Any

from ...core.exceptions import OpenRouterParseError
from .models import CompletionMetadata, CompletionResult, TokenUsage

_OPENING_FENCE = re.compile(r"^```(?:json)?\s*\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\n?```\s*$")

_USAGE_FIELDS = ("prompt_tokens", "completion_tokens", "total_tokens")


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code fence (optionally tagged ``json``).

    This is a prefix/suffix heuristic, not a markdown parser.
    """
    cleaned = content.strip()
    if cleaned.startswith("```"):
        cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
        cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
        cleaned = cleaned.strip()
    return cleaned


def decode_content(raw_content: str) -> Any:
    """Decode JSON content, returning the raw string when it is not JSON."""
    try:
        return json.loads(strip_code_fences(raw_content))
    except ValueError:
        return raw_content


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)


def parse_response(envelope: dict[str, Any], requested_model: str | None = None) -> CompletionResult[Any]:
    """Validate a completion envelope and build a ``CompletionResult``.

    Args:
        envelope: Decoded JSON body of a successful response
        requested_model: Model sent in the request, used if the envelope omits it

    Returns:
        Completion result with decoded content

    Raises:
        OpenRouterParseError: If choices, message content or usage are missing or malformed
    """
    choices = envelope.get("choices")
    if not isinstance(choices, list):
        raise OpenRouterParseError("API response does not contain a choices array", {"response": envelope})
    if not choices:
        raise OpenRouterParseError("API response contains an empty choices array", {"response": envelope})

    choice = choices[0]
    message = choice.get("message") if isinstance(choice, dict) else None
    if not isinstance(message, dict) or not isinstance(message.get("content"), str):
        raise OpenRouterParseError("Invalid choice structure in API response", {"choice": choice})

    usage = envelope.get("usage")
    if not isinstance(usage, dict) or not all(_is_number(usage.get(name)) for name in _USAGE_FIELDS):
        raise OpenRouterParseError("API response does not contain token usage information", {"usage": usage})

    request_id = envelope.get("id")
    finish_reason = choice.get("finish_reason")

    return CompletionResult[Any](
        content=decode_content(message["content"]),
        usage=TokenUsage(
            prompt_tokens=int(usage["prompt_tokens"]),
            completion_tokens=int(usage["completion_tokens"]),
            total_tokens=int(usage["total_tokens"]),
        ),
        model=str(envelope.get("model") or requested_model or ""),
        finish_reason=str(finish_reason) if finish_reason is not None else None,
        metadata=CompletionMetadata(request_id=str(request_id) if request_id is not None else None),
    )
