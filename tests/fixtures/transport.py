"""Test doubles for the HTTP transport and backoff sleep."""

import httpx


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class ScriptedHandler:
    """MockTransport handler that replays outcomes in order.

    Each outcome is an ``httpx.Response`` or an exception to raise. The last
    outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes: httpx.Response | Exception) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes[min(len(self.requests), len(self.outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        # Fresh copy per request; the transport binds each response to its request
        return httpx.Response(outcome.status_code, headers=outcome.headers, content=outcome.content)

    @property
    def call_count(self) -> int:
        return len(self.requests)
