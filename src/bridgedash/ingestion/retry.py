"""Bounded retry with exponential backoff for explorer / bridge API calls."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx
import structlog

log = structlog.get_logger(__name__)

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """All attempts failed. last_error is the final underlying exception."""

    def __init__(self, name: str, attempts: int, last_error: BaseException) -> None:
        self.name = name
        self.attempts = attempts
        self.last_error = last_error
        self.timed_out = isinstance(last_error, httpx.TimeoutException)
        kind = "timed out" if self.timed_out else f"failed: {last_error}"
        super().__init__(f"{name} {kind} after {attempts} attempt(s)")


def is_retryable(exc: BaseException) -> bool:
    """Transport errors, timeouts, 429 and 5xx are worth another attempt."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return isinstance(exc, httpx.TransportError)


class RetryPolicy:
    """max_attempts tries; delay before retry n is base * multiplier**(n-1), capped."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay_sec: float = 1.0,
        multiplier: float = 2.0,
        max_delay_sec: float = 30.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.max_attempts = max(1, max_attempts)
        self.base_delay_sec = base_delay_sec
        self.multiplier = multiplier
        self.max_delay_sec = max_delay_sec
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        """Delay after failed attempt number `attempt` (1-based): 1s, 2s, 4s, ..."""
        return min(self.base_delay_sec * (self.multiplier ** (attempt - 1)), self.max_delay_sec)

    async def run(
        self,
        op: Callable[[], Awaitable[T]],
        *,
        name: str,
        retry_on: Callable[[BaseException], bool] = is_retryable,
    ) -> T:
        """Await op() until it succeeds. Non-retryable errors propagate immediately."""
        attempt = 0
        while True:
            attempt += 1
            try:
                return await op()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if not retry_on(e):
                    raise
                if isinstance(e, httpx.TimeoutException):
                    log.warning("request_timeout", call=name, attempt=attempt)
                else:
                    log.warning("request_failed", call=name, attempt=attempt, error=str(e))
                if attempt >= self.max_attempts:
                    log.error("retries_exhausted", call=name, attempts=attempt)
                    raise RetryExhaustedError(name, attempt, e) from e
                await self._sleep(self.delay_for(attempt))
