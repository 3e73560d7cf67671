"""Prompt, output schema and candidate validation for flashcard generation."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

import structlog

from ...core.exceptions import OpenRouterParseError, OpenRouterValidationError
from .models import CandidateRejection, FlashcardCandidate, ResponseFormat

logger = structlog.get_logger(__name__)

MIN_INPUT_LENGTH = 50
FRONT_MAX_LENGTH = 200
BACK_MAX_LENGTH = 500

DEFAULT_TEMPERATURE = 0.3
MAX_OUTPUT_TOKENS = 4000
SCHEMA_NAME = "flashcard_generation"
PREVIEW_LENGTH = 100


def prepare_input_text(input_text: Any) -> str:
    """Trim the source text and reject input too short to produce flashcards.

    Raises:
        OpenRouterValidationError: If the text is empty or shorter than MIN_INPUT_LENGTH
    """
    if not isinstance(input_text, str) or not input_text.strip():
        raise OpenRouterValidationError(
            "Input text is required and cannot be empty",
            400,
            details={"field": "input_text", "provided": input_text if not isinstance(input_text, str) else ""},
        )

    text = input_text.strip()
    if len(text) < MIN_INPUT_LENGTH:
        raise OpenRouterValidationError(
            f"Input text must be at least {MIN_INPUT_LENGTH} characters to generate meaningful flashcards",
            400,
            details={"field": "input_text", "length": len(text)},
        )
    return text


def build_system_prompt(min_flashcards: int, max_flashcards: int, content_language: str | None = None) -> str:
    """Build the fixed instructions for the flashcard model."""
    language_rule = (
        f"Write questions and answers in {content_language}"
        if content_language
        else "Write questions and answers in the language of the provided text"
    )
    return f"""You are an expert in creating educational flashcards. Your task is to analyze the provided text and create high-quality flashcards for learning.

CRITICAL: The JSON field names MUST be exactly "front" and "back", in English, whatever language the content is written in.

FLASHCARD CREATION RULES:
1. Generate between {min_flashcards} and {max_flashcards} flashcards from the provided text
2. Each flashcard consists of a question (field name: "front") and an answer (field name: "back")
3. Questions must be clear, specific, and concise (1-{FRONT_MAX_LENGTH} characters)
4. Answers must be complete but concise (1-{BACK_MAX_LENGTH} characters)
5. Focus on key concepts, definitions, and relationships between concepts
6. Prefer conceptual and definitional questions over trivial recall
7. Each flashcard should test one specific concept or fact
8. {language_rule}

Example output structure:
{{
  "flashcards": [
    {{
      "front": "What is photosynthesis?",
      "back": "The process by which plants convert sunlight into chemical energy"
    }}
  ]
}}"""


def build_user_prompt(text: str, min_flashcards: int, max_flashcards: int) -> str:
    """Wrap the source text with the generation request."""
    return (
        f"Analyze the text below and generate {min_flashcards}-{max_flashcards} educational flashcards.\n\n"
        'Use the JSON field names "flashcards", "front" and "back".\n\n'
        f"Text to analyze:\n{text}"
    )


def build_flashcard_schema(min_flashcards: int, max_flashcards: int) -> dict[str, Any]:
    """JSON schema constraining the model output server-side."""
    return {
        "type": "object",
        "properties": {
            "flashcards": {
                "type": "array",
                "description": "Array of flashcard objects. Each flashcard MUST have 'front' and 'back' fields.",
                "items": {
                    "type": "object",
                    "properties": {
                        "front": {
                            "type": "string",
                            "description": f"Question on the flashcard (1-{FRONT_MAX_LENGTH} characters).",
                        },
                        "back": {
                            "type": "string",
                            "description": f"Answer on the flashcard (1-{BACK_MAX_LENGTH} characters).",
                        },
                    },
                    "required": ["front", "back"],
                    "additionalProperties": False,
                },
                "minItems": min_flashcards,
                "maxItems": max_flashcards,
            },
        },
        "required": ["flashcards"],
        "additionalProperties": False,
    }


def build_response_format(min_flashcards: int, max_flashcards: int) -> ResponseFormat:
    """Strict ``json_schema`` response format for flashcard generation."""
    return ResponseFormat(
        type="json_schema",
        json_schema={
            "name": SCHEMA_NAME,
            "strict": True,
            "schema": build_flashcard_schema(min_flashcards, max_flashcards),
        },
    )


def _preview(value: str) -> str:
    if len(value) > PREVIEW_LENGTH:
        return f"{value[:PREVIEW_LENGTH]}..."
    return value


def _check_side(card: dict[str, Any], index: int, side: str, max_length: int) -> str | CandidateRejection:
    value = card.get(side)
    if not isinstance(value, str) or not value.strip():
        return CandidateRejection(
            index=index,
            field=side,
            reason=f"missing or empty '{side}' (type: {type(value).__name__})",
            length=0 if isinstance(value, str) else None,
        )

    trimmed = value.strip()
    if len(trimmed) > max_length:
        return CandidateRejection(
            index=index,
            field=side,
            reason=f"'{side}' has {len(trimmed)} characters, allowed 1-{max_length}",
            length=len(trimmed),
            preview=_preview(trimmed),
        )
    return trimmed


def validate_candidates(items: list[Any]) -> tuple[list[FlashcardCandidate], list[CandidateRejection]]:
    """Split model output into valid, trimmed candidates and rejections.

    Order of the surviving candidates matches the order the model emitted them.
    """
    valid: list[FlashcardCandidate] = []
    rejections: list[CandidateRejection] = []

    for index, card in enumerate(items):
        if not isinstance(card, dict):
            rejections.append(
                CandidateRejection(index=index, field=None, reason=f"not an object (type: {type(card).__name__})")
            )
            continue

        front = _check_side(card, index, "front", FRONT_MAX_LENGTH)
        if isinstance(front, CandidateRejection):
            rejections.append(front)
            continue

        back = _check_side(card, index, "back", BACK_MAX_LENGTH)
        if isinstance(back, CandidateRejection):
            rejections.append(back)
            continue

        valid.append(FlashcardCandidate(front=front, back=back))

    return valid, rejections


def extract_flashcards(content: Any, min_flashcards: int) -> list[FlashcardCandidate]:
    """Validate decoded model content and return the surviving candidates.

    Raises:
        OpenRouterParseError: If the content has no flashcards array or no candidate survives
    """
    items = content.get("flashcards") if isinstance(content, dict) else None
    if not isinstance(items, list):
        raise OpenRouterParseError("API response does not contain a flashcards array", {"content": content})

    valid, rejections = validate_candidates(items)

    for rejection in rejections:
        logger.warning(
            "Flashcard candidate rejected",
            index=rejection.index,
            field=rejection.field,
            reason=rejection.reason,
            length=rejection.length,
            preview=rejection.preview,
        )

    if not valid:
        raise OpenRouterParseError(
            "No valid flashcards could be generated",
            {
                "generated_count": len(items),
                "validation_errors": [asdict(rejection) for rejection in rejections],
                "raw_content": content,
            },
        )

    if len(valid) < min_flashcards:
        logger.warning("Fewer flashcards than requested", valid_count=len(valid), min_flashcards=min_flashcards)

    logger.info(
        "Flashcard candidates validated",
        received=len(items),
        valid=len(valid),
        rejected=len(rejections),
    )
    return valid
