"""Request, response and configuration models for the OpenRouter client.

Validation failures while building these models never surface as pydantic
errors: configuration problems raise ``OpenRouterConfigError`` and request
problems raise ``OpenRouterValidationError``, both naming the offending field
and the value that was provided.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

import httpx
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from ...core.exceptions import OpenRouterConfigError, OpenRouterValidationError
from ...core.redaction import REDACTED, preview_secret

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODELS_URL = "https://openrouter.ai/api/v1/models"
DEFAULT_MODEL = "xiaomi/mimo-v2-flash:free"

MAX_MESSAGE_LENGTH = 100_000

_URL_DEFAULTS = {"base_url": DEFAULT_BASE_URL, "models_url": DEFAULT_MODELS_URL}

ContentT = TypeVar("ContentT")


def _describe_first_error(exc: ValidationError) -> tuple[str, Any, str]:
    """Return (field path, provided value, reason) for the first validation error."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or "__root__"
    return field, error.get("input"), error["msg"]


class ClientConfig(BaseModel):
    """Immutable configuration of an ``OpenRouterClient``."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    base_url: str = DEFAULT_BASE_URL
    default_model: str = DEFAULT_MODEL
    default_system_message: str | None = None
    timeout_ms: StrictInt = Field(default=60_000, ge=5_000, le=300_000)
    max_retries: StrictInt = Field(default=3, ge=0, le=10)
    retry_delay_ms: StrictInt = Field(default=1_000, ge=100, le=10_000)
    models_url: str = DEFAULT_MODELS_URL
    http_referer: str | None = None
    app_title: str | None = None

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            field, provided, reason = _describe_first_error(exc)
            if field == "api_key":
                provided = REDACTED
            raise OpenRouterConfigError(
                f"Invalid client configuration for '{field}': {reason}",
                details={"field": field, "provided": provided},
            ) from exc

    @field_validator("api_key", mode="before")
    @classmethod
    def validate_api_key(cls, v: Any) -> str:
        """Require a non-blank API key."""
        if isinstance(v, SecretStr):
            v = v.get_secret_value()
        if not isinstance(v, str) or not v.strip():
            raise ValueError("API key is required and must be a non-empty string")
        return v.strip()

    @field_validator("base_url", "models_url", mode="before")
    @classmethod
    def validate_url(cls, v: Any, info: ValidationInfo) -> str:
        """Require an HTTPS URL that parses, falling back to the OpenRouter default."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return _URL_DEFAULTS[info.field_name]
        if not isinstance(v, str):
            raise ValueError("URL must be a string")

        url = v.strip()
        if not url.startswith("https://"):
            raise ValueError("URL must use the HTTPS scheme")
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise ValueError(f"URL is malformed: {e}") from e
        if not parsed.host:
            raise ValueError("URL is malformed: missing host")
        return url

    @field_validator("default_model", mode="before")
    @classmethod
    def set_default_model(cls, v: Any) -> Any:
        """Fall back to the free-tier default model."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_MODEL
        return v.strip() if isinstance(v, str) else v

    @field_validator("http_referer", "app_title", mode="before")
    @classmethod
    def strip_optional(cls, v: Any) -> Any:
        """Trim attribution headers; blank values are dropped."""
        if isinstance(v, str):
            return v.strip() or None
        return v

    def redacted(self) -> dict[str, Any]:
        """Configuration suitable for logging, with the API key reduced to a preview."""
        return {
            "api_key": preview_secret(self.api_key.get_secret_value()),
            "base_url": self.base_url,
            "default_model": self.default_model,
            "timeout_ms": self.timeout_ms,
            "max_retries": self.max_retries,
            "retry_delay_ms": self.retry_delay_ms,
            "http_referer": self.http_referer,
            "app_title": self.app_title,
        }


class WireModel(BaseModel):
    """Base for request parts nested inside a ``RequestModel``.

    No custom ``__init__``: pydantic would call it for nested values and
    lose the path of the offending field.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RequestModel(BaseModel):
    """Base for top-level caller-supplied request models.

    Construction failures are raised as ``OpenRouterValidationError`` before
    any network call is attempted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            field, provided, reason = _describe_first_error(exc)
            if isinstance(provided, str) and len(provided) > 200:
                provided = f"<string of {len(provided)} characters>"
            raise OpenRouterValidationError(
                f"Invalid value for '{field}': {reason}",
                400,
                details={"field": field, "provided": provided},
            ) from exc


class ChatMessage(WireModel):
    """A single role-tagged chat message."""

    role: Literal["system", "user", "assistant"]
    content: StrictStr = Field(max_length=MAX_MESSAGE_LENGTH)


class JsonSchemaFormat(WireModel):
    """Named JSON schema the model output must follow."""

    name: StrictStr = Field(min_length=1)
    strict: StrictBool
    schema_: dict[str, Any] = Field(alias="schema")


class ResponseFormat(WireModel):
    """Structured output descriptor sent as ``response_format``."""

    type: Literal["json_schema"]
    json_schema: JsonSchemaFormat

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the provider's field names."""
        return self.model_dump(by_alias=True)


class CompletionOptions(RequestModel):
    """Options for a single chat completion call."""

    messages: list[ChatMessage] = Field(min_length=1)
    system_message: StrictStr | None = Field(default=None, max_length=MAX_MESSAGE_LENGTH)
    model: str | None = None
    response_format: ResponseFormat | None = None

    # Sampling parameters, forwarded only when set
    temperature: StrictFloat | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: StrictInt | None = Field(default=None, gt=0)
    top_p: StrictFloat | None = Field(default=None, ge=0.0, le=1.0)
    top_k: StrictInt | None = Field(default=None, gt=0)
    frequency_penalty: StrictFloat | None = Field(default=None, ge=-2.0, le=2.0)
    presence_penalty: StrictFloat | None = Field(default=None, ge=-2.0, le=2.0)

    # Per-call overrides of the client configuration
    timeout_ms: StrictInt | None = Field(default=None, gt=0)
    max_retries: StrictInt | None = Field(default=None, ge=0, le=10)


class TokenUsage(BaseModel):
    """Token counts reported by the provider."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class CompletionMetadata(BaseModel):
    """Request metadata attached to a completion result."""

    model_config = ConfigDict(frozen=True)

    request_id: str | None = None
    processing_time_ms: int = 0


class CompletionResult(BaseModel, Generic[ContentT]):
    """Parsed result of a successful completion call.

    ``content`` is the decoded JSON value when the model answered with JSON,
    otherwise the raw string.
    """

    model_config = ConfigDict(frozen=True)

    content: ContentT
    usage: TokenUsage
    model: str
    finish_reason: str | None = None
    metadata: CompletionMetadata = Field(default_factory=CompletionMetadata)


class ModelPricing(BaseModel):
    """Cost per token, as reported by the provider."""

    model_config = ConfigDict(frozen=True)

    prompt: float = 0.0
    completion: float = 0.0


class ModelCapabilities(BaseModel):
    """Capability flags of a model."""

    model_config = ConfigDict(frozen=True)

    streaming: bool = False
    function_calling: bool = False
    json_mode: bool = True


class ModelInfo(BaseModel):
    """Descriptor of a model available through the provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    pricing: ModelPricing = Field(default_factory=ModelPricing)
    context_length: int = 0
    supports: ModelCapabilities = Field(default_factory=ModelCapabilities)


class FlashcardCandidate(BaseModel):
    """A validated question/answer pair proposed by the model."""

    model_config = ConfigDict(frozen=True)

    front: str
    back: str


class FlashcardGenerationOptions(RequestModel):
    """Options for ``generate_flashcards``."""

    model: str | None = None
    temperature: StrictFloat | None = Field(default=None, ge=0.0, le=2.0)
    min_flashcards: StrictInt = Field(default=8, ge=1, le=50)
    max_flashcards: StrictInt = Field(default=15, ge=1, le=50)
    timeout_ms: StrictInt | None = Field(default=None, gt=0)
    content_language: str | None = None

    @field_validator("max_flashcards")
    @classmethod
    def validate_range(cls, v: int, info: ValidationInfo) -> int:
        """Require max_flashcards >= min_flashcards."""
        min_flashcards = info.data.get("min_flashcards")
        if min_flashcards is not None and v < min_flashcards:
            raise ValueError(f"must be greater than or equal to min_flashcards ({min_flashcards})")
        return v


@dataclass(frozen=True)
class CandidateRejection:
    """Why a flashcard candidate was dropped."""

    index: int
    field: str | None
    reason: str
    length: int | None = None
    preview: str | None = None
