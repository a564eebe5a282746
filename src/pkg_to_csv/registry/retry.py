"""Retry policy for fallible async operations."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog
from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt, wait_incrementing

logger = structlog.get_logger(__name__)

T = TypeVar("T")

SleepFunction = Callable[[float], Awaitable[Any]]


class RetryPolicy:
    """Run an async callable up to ``max_attempts`` times.

    The delay before retry ``n`` (1-based) is ``base_delay * n``, so with the
    defaults the waits are 0.5s then 1.0s. The last exception is re-raised once
    attempts are exhausted.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 0.5,
        sleep: SleepFunction = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if base_delay < 0:
            raise ValueError("base_delay must not be negative")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        """Delay after failed attempt number ``attempt``."""
        return self.base_delay * attempt

    def _log_retry(self, state: RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        logger.debug(
            "retrying",
            attempt=state.attempt_number,
            delay=state.next_action.sleep if state.next_action else None,
            error=str(exc) if exc else None,
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.base_delay, increment=self.base_delay),
            sleep=self._sleep,
            before_sleep=self._log_retry,
        )

    async def call(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        return await self._retrying()(fn, *args, **kwargs)
