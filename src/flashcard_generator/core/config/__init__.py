"""Settings and logging configuration."""

from .config import Environment, Settings, get_settings
from .logging import LogFormat, LogLevel, configure_logging, mask_sensitive_data

__all__ = [
    "Environment",
    "LogFormat",
    "LogLevel",
    "Settings",
    "configure_logging",
    "get_settings",
    "mask_sensitive_data",
]
