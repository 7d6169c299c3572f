"""Retry a fallible operation with randomized exponential backoff."""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Protocol, TypeVar

from pacer.config import BackOffConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryPredicate = Callable[[Exception, int], "bool | Awaitable[bool]"]

# exponent cap keeps 2**n well inside float range
_MAX_EXPONENT = 31


class RandomSource(Protocol):
    def random(self) -> float: ...


_shared_random = random.Random()


class BackOff(Generic[T]):
    """Run *func*, retrying failures with randomized exponential delays.

    The first invocation is attempt 1. After a failed attempt ``n`` the loop
    sleeps for ``initial_delay * 2**n``, randomized by
    ``percentage_randomization`` and capped at ``max_delay``, before trying
    again. With the defaults that is up to 8 attempts with sleeps of
    0.4, 0.8, 1.6, 3.2, 6.4, 12.8 and 25.6 seconds, each +/- 25%.

    The failure of the last attempt, or of any attempt *retry_if* declines
    to retry, propagates to the caller unchanged.

    Args:
        func: Operation to run. May return a value or an awaitable.
        initial_delay: Delay factor in seconds. Must be non-negative.
        percentage_randomization: Fraction the delay is randomized by,
            clamped to 0.0-1.0.
        max_delay: Upper bound for a single sleep, in seconds.
        max_attempts: Total attempts including the first. Must be positive.
        retry_if: Called as ``retry_if(error, attempt)`` after a non-final
            failure. Only an explicit falsy result stops the loop. May be async.
        rng: Random source exposing ``random()``; defaults to a shared
            ``random.Random``.
        sleep: Coroutine function used to wait between attempts.

    Example::

        response = await BackOff(
            lambda: client.get("https://example.com"),
            retry_if=lambda error, attempt: isinstance(error, httpx.TransportError),
        )()
    """

    __slots__ = (
        "_rng",
        "_sleep",
        "func",
        "initial_delay",
        "max_attempts",
        "max_delay",
        "percentage_randomization",
        "retry_if",
    )

    def __init__(
        self,
        func: Callable[[], T | Awaitable[T]],
        *,
        initial_delay: float = 0.2,
        percentage_randomization: float = 0.25,
        max_delay: float = 30.0,
        max_attempts: int = 8,
        retry_if: RetryPredicate | None = None,
        rng: RandomSource | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if initial_delay < 0:
            raise ValueError(f"initial_delay must be non-negative, got {initial_delay}")

        if max_delay < 0:
            raise ValueError(f"max_delay must be non-negative, got {max_delay}")

        if max_attempts < 1:
            raise ValueError(f"max_attempts must be greater than 0, got {max_attempts}")

        self.func = func
        self.initial_delay = initial_delay
        self.percentage_randomization = percentage_randomization
        self.max_delay = max_delay
        self.max_attempts = max_attempts
        self.retry_if = retry_if
        self._rng = rng or _shared_random
        self._sleep = sleep

    @classmethod
    def from_config(
        cls,
        func: Callable[[], T | Awaitable[T]],
        config: BackOffConfig,
        **kwargs: Any,
    ) -> BackOff[T]:
        return cls(
            func,
            initial_delay=config.initial_delay,
            percentage_randomization=config.percentage_randomization,
            max_delay=config.max_delay,
            max_attempts=config.max_attempts,
            **kwargs,
        )

    async def __call__(self) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                result = self.func()
                if inspect.isawaitable(result):
                    result = await result
                return result
            except Exception as error:
                if attempt >= self.max_attempts:
                    raise

                if not await self._should_retry(error, attempt):
                    logger.debug("Attempt %d declined for retry: %r", attempt, error)
                    raise

                delay = self.get_sleep_duration(attempt)
                logger.warning(
                    "Attempt %d/%d failed with %r; retrying in %.3fs",
                    attempt,
                    self.max_attempts,
                    error,
                    delay,
                )

            await self._sleep(delay)

    def get_sleep_duration(self, attempt: int) -> float:
        """Return the randomized delay in seconds to sleep after *attempt*."""
        spread = min(max(self.percentage_randomization, 0.0), 1.0)
        rf = 1 + spread * (self._rng.random() * 2 - 1)
        delay = self.initial_delay * 2.0 ** min(attempt, _MAX_EXPONENT) * rf
        return min(delay, self.max_delay)

    async def _should_retry(self, error: Exception, attempt: int) -> bool:
        if self.retry_if is None:
            return True
        verdict = self.retry_if(error, attempt)
        if inspect.isawaitable(verdict):
            verdict = await verdict
        return verdict is None or bool(verdict)

    def __repr__(self) -> str:
        return (
            f"BackOff(initial_delay={self.initial_delay}, "
            f"percentage_randomization={self.percentage_randomization}, "
            f"max_delay={self.max_delay}, max_attempts={self.max_attempts})"
        )
