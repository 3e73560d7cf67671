"""Retry policy with exponential backoff for the completion client."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryAttempt:
    """Information about a failed attempt that is about to be retried."""

    attempt_number: int
    delay_ms: float
    reason: str
    timestamp: float = field(default_factory=time.time)


class RetryPolicy:
    """Bounded retry budget with exponential backoff.

    A single budget is shared by every retryable failure kind: a sequence of
    (429, 500, 429) consumes three retries, not three separate budgets.
    """

    def __init__(
        self,
        max_retries: int,
        base_delay_ms: float,
        exponential_base: float = 2.0,
        sleep: SleepFunc | None = None,
    ):
        """Initialize retry policy.

        Args:
            max_retries: Retries allowed after the first attempt
            base_delay_ms: Delay before the first retry in milliseconds
            exponential_base: Growth factor between consecutive delays
            sleep: Awaitable sleep taking seconds, defaults to asyncio.sleep
        """
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.exponential_base = exponential_base
        self._sleep = sleep or asyncio.sleep
        self.attempts: list[RetryAttempt] = []

    @property
    def max_attempts(self) -> int:
        """Total number of attempts, the first one included."""
        return self.max_retries + 1

    def can_retry(self, attempt_index: int) -> bool:
        """Whether another attempt may follow the (0-based) attempt that just failed."""
        return attempt_index < self.max_retries

    def backoff_ms(self, attempt_index: int) -> float:
        """Delay before retrying after the (0-based) attempt that just failed."""
        return self.base_delay_ms * (self.exponential_base**attempt_index)

    async def wait(self, attempt_index: int, reason: str) -> RetryAttempt:
        """Record the failed attempt and sleep for its backoff."""
        delay_ms = self.backoff_ms(attempt_index)
        attempt = RetryAttempt(attempt_number=attempt_index + 1, delay_ms=delay_ms, reason=reason)
        self.attempts.append(attempt)
        await self._sleep(delay_ms / 1000)
        return attempt
