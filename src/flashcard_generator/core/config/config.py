"""Configuration management for the flashcard generator."""

from enum import Enum
from functools import lru_cache
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...infrastructure.llm.models import ClientConfig
from .logging import LogFormat, LogLevel

load_dotenv()

MOCK_API_KEY = "mock"


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    ENVIRONMENT: Environment = Field(default=Environment.DEVELOPMENT)

    # OpenRouter Configuration
    OPENROUTER_API_KEY: SecretStr | None = Field(default=None)
    OPENROUTER_API_URL: str | None = Field(default=None)
    OPENROUTER_MODEL: str | None = Field(default=None)
    OPENROUTER_MODELS_URL: str | None = Field(default=None)
    OPENROUTER_DEFAULT_SYSTEM_MESSAGE: str | None = Field(default=None)
    OPENROUTER_TIMEOUT_MS: int = Field(default=60_000, ge=5_000, le=300_000)
    OPENROUTER_MAX_RETRIES: int = Field(default=3, ge=0, le=10)
    OPENROUTER_RETRY_DELAY_MS: int = Field(default=1_000, ge=100, le=10_000)
    OPENROUTER_HTTP_REFERER: str | None = Field(default=None)
    OPENROUTER_APP_TITLE: str | None = Field(default=None)
    ALLOW_MOCK_CLIENT: bool = Field(default=False)

    # Logging Configuration
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_FORMAT: LogFormat = Field(default=LogFormat.JSON)

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalize_log_format(cls, v: Any) -> Any:
        """Accept uppercase format names."""
        return v.lower() if isinstance(v, str) else v

    @property
    def is_mock_mode(self) -> bool:
        """True when no real API key is configured."""
        if self.OPENROUTER_API_KEY is None:
            return True
        key = self.OPENROUTER_API_KEY.get_secret_value().strip()
        return not key or key == MOCK_API_KEY

    def client_config(self) -> ClientConfig:
        """Build the OpenRouter client configuration.

        Raises:
            OpenRouterConfigError: If the key is missing or a value is invalid
        """
        api_key = self.OPENROUTER_API_KEY.get_secret_value() if self.OPENROUTER_API_KEY else ""
        return ClientConfig(
            api_key=api_key,
            base_url=self.OPENROUTER_API_URL,
            default_model=self.OPENROUTER_MODEL,
            default_system_message=self.OPENROUTER_DEFAULT_SYSTEM_MESSAGE,
            timeout_ms=self.OPENROUTER_TIMEOUT_MS,
            max_retries=self.OPENROUTER_MAX_RETRIES,
            retry_delay_ms=self.OPENROUTER_RETRY_DELAY_MS,
            models_url=self.OPENROUTER_MODELS_URL,
            http_referer=self.OPENROUTER_HTTP_REFERER,
            app_title=self.OPENROUTER_APP_TITLE,
        )

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump settings without exposing secrets."""
        data = self.model_dump()

        # Mask sensitive data
        if data.get("OPENROUTER_API_KEY"):
            data["OPENROUTER_API_KEY"] = "***masked***"

        return data


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()
