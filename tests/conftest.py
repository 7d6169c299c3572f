"""Shared fixtures for pacer tests."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from typing import Any

import pytest

from pacer.config import BackOffConfig, DebounceConfig, ThrottleConfig


class FakeTimerHandle:
    __slots__ = ("_cancelled", "callback", "when")

    def __init__(self, when: float, callback: Callable[[], Any]) -> None:
        self.when = when
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class FakeLoop:
    """Manually driven scheduler: timers fire only from :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[tuple[float, int, FakeTimerHandle]] = []
        self._seq = itertools.count()

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[[], Any]) -> FakeTimerHandle:
        handle = FakeTimerHandle(self.now + delay, callback)
        heapq.heappush(self._timers, (handle.when, next(self._seq), handle))
        return handle

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, handle in self._timers if not handle.cancelled())

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due timers in order."""
        target = self.now + seconds
        while self._timers and self._timers[0][0] <= target + 1e-9:
            when, _, handle = heapq.heappop(self._timers)
            if handle.cancelled():
                continue
            self.now = max(self.now, when)
            handle.callback()
        self.now = target

    def run_calls(self, gaps_ms: list[float], fn: Callable[[int], Any]) -> None:
        """Advance by each gap in turn and call *fn* with a 1-based label."""
        for label, gap in enumerate(gaps_ms, start=1):
            self.advance(gap / 1000)
            fn(label)


@pytest.fixture
def fake_loop():
    return FakeLoop()


@pytest.fixture
def calls():
    return []


@pytest.fixture
def default_debounce_config():
    return DebounceConfig()


@pytest.fixture
def default_throttle_config():
    return ThrottleConfig()


@pytest.fixture
def default_backoff_config():
    return BackOffConfig()


@pytest.fixture
def no_sleep():
    delays: list[float] = []

    async def sleep(delay: float) -> None:
        delays.append(delay)

    sleep.delays = delays  # type: ignore[attr-defined]
    return sleep
