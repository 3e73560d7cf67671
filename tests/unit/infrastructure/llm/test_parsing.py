"""Tests for completion envelope parsing."""

import pytest

from flashcard_generator.core.exceptions import OpenRouterParseError
from flashcard_generator.infrastructure.llm.parsing import decode_content, parse_response, strip_code_fences
from tests.fixtures.sample_responses import make_envelope


class TestStripCodeFences:
    """Test removal of markdown code fences."""

    @pytest.mark.parametrize(
        "raw",
        [
            '```json\n{"a": 1}\n```',
            '```JSON\n{"a": 1}\n```',
            '```\n{"a": 1}\n```',
            '  ```json{"a": 1}```  ',
            '{"a": 1}',
        ],
    )
    def test_fences_removed(self, raw):
        """Test fenced and unfenced content yield the same JSON text."""
        assert strip_code_fences(raw) == '{"a": 1}'


class TestDecodeContent:
    """Test decoding of message content."""

    def test_fenced_json(self):
        """Test fenced JSON is decoded."""
        assert decode_content('```json\n{"flashcards": []}\n```') == {"flashcards": []}

    def test_plain_text(self):
        """Test non-JSON text is returned unchanged."""
        assert decode_content("Hello there") == "Hello there"


class TestParseResponse:
    """Test cases for parse_response."""

    def test_valid_envelope(self):
        """Test a well-formed envelope produces a result."""
        result = parse_response(make_envelope({"answer": 42}, model="openai/gpt-4o-mini", request_id="gen-9"))

        assert result.content == {"answer": 42}
        assert result.model == "openai/gpt-4o-mini"
        assert result.finish_reason == "stop"
        assert result.usage.total_tokens == 200
        assert result.metadata.request_id == "gen-9"

    def test_model_falls_back_to_requested(self):
        """Test the requested model is used when the envelope omits one."""
        envelope = make_envelope("hi")
        del envelope["model"]

        assert parse_response(envelope, requested_model="a/b").model == "a/b"

    @pytest.mark.parametrize(
        ("mutate", "message"),
        [
            (lambda e: e.pop("choices"), "does not contain a choices array"),
            (lambda e: e.update(choices=[]), "empty choices array"),
            (lambda e: e["choices"][0].pop("message"), "Invalid choice structure"),
            (lambda e: e["choices"][0]["message"].update(content=None), "Invalid choice structure"),
            (lambda e: e.pop("usage"), "token usage"),
            (lambda e: e["usage"].update(total_tokens="many"), "token usage"),
            (lambda e: e["usage"].update(total_tokens=float("nan")), "token usage"),
            (lambda e: e["usage"].update(prompt_tokens=float("inf")), "token usage"),
        ],
    )
    def test_malformed_envelope(self, mutate, message):
        """Test each structural defect raises a parse error."""
        envelope = make_envelope("hi")
        mutate(envelope)

        with pytest.raises(OpenRouterParseError, match=message):
            parse_response(envelope)
