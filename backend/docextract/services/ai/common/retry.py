"""Bounded fixed-delay retry for model invocations.

Only ``Unavailable`` is retried.  Every other failure is terminal on the
attempt it happens: it signals a request-shape problem, not a flaky remote.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import RetriesExhausted, Unavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be >= 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.delay_seconds < 0:
            msg = f"delay_seconds must be >= 0, got {self.delay_seconds}"
            raise ValueError(msg)


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    value: T
    attempts: int


class RetryController:
    """Runs a call until it succeeds, fails permanently, or attempts run out."""

    def __init__(self, policy: RetryPolicy | None = None, *, sleep: Sleep = asyncio.sleep) -> None:
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    def with_policy(self, policy: RetryPolicy) -> RetryController:
        return RetryController(policy, sleep=self._sleep)

    async def run(self, call: Callable[[], Awaitable[T]]) -> RetryOutcome[T]:
        attempt = 1
        while True:
            try:
                value = await call()
            except Unavailable as exc:
                if attempt >= self.policy.max_attempts:
                    logger.warning("Attempt %d/%d unavailable, giving up", attempt, self.policy.max_attempts)
                    raise RetriesExhausted(attempt, exc) from exc
                logger.warning(
                    "Attempt %d/%d unavailable (%s), retrying in %.2fs",
                    attempt,
                    self.policy.max_attempts,
                    exc,
                    self.policy.delay_seconds,
                )
                await self._sleep(self.policy.delay_seconds)
                attempt += 1
                continue
            return RetryOutcome(value=value, attempts=attempt)
