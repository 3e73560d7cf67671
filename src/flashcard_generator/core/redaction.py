"""Helpers that keep API keys out of error messages and log output."""

import re

REDACTED = "[REDACTED]"

# OpenRouter and OpenAI style keys (sk-or-v1-..., sk-proj-...), not words like "risk-free"
SECRET_PATTERN = re.compile(r"(?<![A-Za-z0-9])sk-[A-Za-z0-9_\-]{16,}")


def redact_secrets(text: str, *secrets: str) -> str:
    """Replace key-shaped substrings and any explicitly given secrets in ``text``."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return SECRET_PATTERN.sub(REDACTED, text)


def preview_secret(secret: str) -> str:
    """Return a short, non-reversible preview of a secret for diagnostics."""
    if len(secret) > 12:
        return f"{secret[:8]}...{secret[-4:]}"
    return REDACTED
