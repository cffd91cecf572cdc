"""Bounded exponential backoff for single-shot async operations."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Retry an operation up to ``max_attempts`` times.

    The delay before attempt ``n + 1`` is ``base_delay * multiplier ** (n - 1)``,
    so the defaults sleep 2s then 4s and give up after the third failure.
    """

    max_attempts: int = 3
    base_delay: float = 2.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.multiplier < 1:
            raise ValueError("base_delay must be >= 0 and multiplier >= 1")

    def delays(self) -> list[float]:
        """Sleeps between consecutive attempts; one fewer than ``max_attempts``."""
        return [self.base_delay * self.multiplier**i for i in range(self.max_attempts - 1)]

    def total_backoff(self) -> float:
        """Total time spent sleeping when every attempt fails."""
        return sum(self.delays())

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        retry_on: tuple[type[BaseException], ...] = (Exception,),
        sleep: SleepFunc = asyncio.sleep,
    ) -> T:
        """Await ``operation()`` until it succeeds or attempts run out.

        Only exceptions matching ``retry_on`` are retried; anything else, and
        the error from the final attempt, propagates unchanged.
        """
        delays = self.delays()
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await operation()
            except retry_on as exc:
                if attempt == self.max_attempts:
                    raise
                delay = delays[attempt - 1]
                logger.warning(
                    "retrying_operation",
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    delay=delay,
                    error=str(exc),
                )
                await sleep(delay)
        raise AssertionError("unreachable")
