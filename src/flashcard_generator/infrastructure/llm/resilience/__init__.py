"""Resilience patterns for the completion client."""

from .retry import RetryAttempt, RetryPolicy, SleepFunc

__all__ = [
    "RetryAttempt",
    "RetryPolicy",
    "SleepFunc",
]
