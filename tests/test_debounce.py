"""Tests for the Debounce engine."""

import asyncio

import pytest

from pacer.config import DebounceConfig
from pacer.engines.debounce import Debounce


def _debounce(fake_loop, **kwargs):
    kwargs.setdefault("delay", 0.1)
    return Debounce(loop=fake_loop, **kwargs)


class TestDebounceCreation:
    def test_defaults(self):
        d = Debounce()
        assert d.delay == Debounce.DEFAULT_DELAY == 0.8
        assert d.leading is False
        assert d.trailing is True
        assert d.is_active is True

    def test_zero_delay_allowed(self, fake_loop):
        d = Debounce(0, loop=fake_loop)
        assert d.delay == 0

    def test_negative_delay_raises(self):
        with pytest.raises(ValueError, match="delay must be non-negative"):
            Debounce(-0.1)

    def test_from_config(self, fake_loop):
        d = Debounce.from_config(DebounceConfig(delay=0.3, leading=True, trailing=False), loop=fake_loop)
        assert d.delay == 0.3
        assert d.leading is True
        assert d.trailing is False

    def test_repr(self):
        d = Debounce(0.5, leading=True)
        assert repr(d) == "Debounce(delay=0.5, leading=True, trailing=True, disposed=False)"


class TestDebounceTrailing:
    def test_fires_after_delay(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.call(lambda: calls.append(1))
        assert calls == []

        fake_loop.advance(0.15)
        assert calls == [1]

    def test_only_last_callback_fires(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.call(lambda: calls.append("A"))
        fake_loop.advance(0.01)
        d.call(lambda: calls.append("B"))
        fake_loop.advance(0.01)
        d.call(lambda: calls.append("C"))

        fake_loop.advance(0.13)
        assert calls == ["C"]

        fake_loop.advance(1.0)
        assert calls == ["C"]

    def test_each_call_restarts_window(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.call(lambda: calls.append(1))
        fake_loop.advance(0.08)
        d.call(lambda: calls.append(2))
        fake_loop.advance(0.08)
        assert calls == []

        fake_loop.advance(0.03)
        assert calls == [2]

    def test_timeline(self, fake_loop, calls):
        # Input:  1-2-3---4---5-6-
        # Output: ------3---4-----6
        d = Debounce(1.0, loop=fake_loop)
        fake_loop.run_calls([0, 500, 500, 1000, 1000, 500], lambda n: d(lambda: calls.append(n)))
        fake_loop.advance(2.0)
        assert calls == [3, 4, 6]

    def test_new_window_after_firing(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.call(lambda: calls.append(1))
        fake_loop.advance(0.2)
        d.call(lambda: calls.append(2))
        fake_loop.advance(0.2)
        assert calls == [1, 2]


class TestDebounceLeading:
    def test_fires_immediately(self, fake_loop, calls):
        d = _debounce(fake_loop, leading=True, trailing=False)
        d.call(lambda: calls.append(1))
        assert calls == [1]

        fake_loop.advance(0.2)
        assert calls == [1]

    def test_rapid_calls_fire_once(self, fake_loop, calls):
        d = _debounce(fake_loop, leading=True, trailing=False)
        for n in range(3):
            d.call(lambda n=n: calls.append(n))
        fake_loop.advance(0.15)
        assert calls == [0]

    def test_timeline(self, fake_loop, calls):
        # Input:  1-2-3---4---5-6-
        # Output: 1-------4---5---
        d = Debounce(1.0, leading=True, trailing=False, loop=fake_loop)
        fake_loop.run_calls([0, 500, 500, 1000, 1000, 500], lambda n: d(lambda: calls.append(n)))
        fake_loop.advance(2.0)
        assert calls == [1, 4, 5]

    def test_leading_only_has_no_pending(self, fake_loop, calls):
        d = _debounce(fake_loop, leading=True, trailing=False)
        d.call(lambda: calls.append(1))
        d.call(lambda: calls.append(2))
        assert d.has_pending is False
        d.flush()
        assert calls == [1]


class TestDebounceLeadingAndTrailing:
    def test_leading_then_trailing(self, fake_loop, calls):
        d = _debounce(fake_loop, leading=True, trailing=True)
        d.call(lambda: calls.append(1))
        assert calls == [1]

        d.call(lambda: calls.append(2))
        d.call(lambda: calls.append(3))
        fake_loop.advance(0.15)
        assert calls == [1, 3]

    def test_single_call_fires_once(self, fake_loop, calls):
        d = _debounce(fake_loop, leading=True, trailing=True)
        d.call(lambda: calls.append(1))
        fake_loop.advance(0.5)
        assert calls == [1]

    def test_timeline(self, fake_loop, calls):
        # Input:  1-2-3---4---5-6-
        # Output: 1-----3-4---5---6
        d = Debounce(1.0, leading=True, trailing=True, loop=fake_loop)
        fake_loop.run_calls([0, 500, 500, 1000, 1000, 500], lambda n: d(lambda: calls.append(n)))
        fake_loop.advance(2.0)
        assert calls == [1, 3, 4, 5, 6]


class TestDebounceDegenerate:
    def test_no_edges_never_fires(self, fake_loop, calls):
        d = _debounce(fake_loop, leading=False, trailing=False)
        d.call(lambda: calls.append(1))
        fake_loop.advance(0.2)
        assert calls == []
        assert d.is_not_active is True
        assert d.is_active is True
        assert d.is_timer_active is False


class TestDebounceReset:
    def test_reset_cancels_pending(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.call(lambda: calls.append(1))
        assert d.is_timer_active is True

        d.reset()
        assert d.is_timer_active is False
        fake_loop.advance(0.15)
        assert calls == []

    def test_reset_on_idle_is_noop(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.reset()
        assert d.is_timer_active is False
        d.call(lambda: calls.append(1))
        fake_loop.advance(0.15)
        assert calls == [1]

    def test_reset_rearms_leading(self, fake_loop, calls):
        d = _debounce(fake_loop, leading=True, trailing=False)
        d.call(lambda: calls.append(1))
        d.reset()
        d.call(lambda: calls.append(2))
        assert calls == [1, 2]


class TestDebounceFlush:
    def test_flush_fires_pending_immediately(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.call(lambda: calls.append(1))
        d.flush()
        assert calls == [1]
        assert d.is_timer_active is False

        fake_loop.advance(0.2)
        assert calls == [1]

    def test_flush_without_pending_is_noop(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.flush()
        assert calls == []

    def test_flush_after_fire_is_noop(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.call(lambda: calls.append(1))
        fake_loop.advance(0.15)
        d.flush()
        assert calls == [1]


class TestDebounceDispose:
    def test_calls_after_dispose_ignored(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.dispose()
        d.call(lambda: calls.append(1))
        d.flush()
        fake_loop.advance(0.2)
        assert calls == []
        assert d.is_active is False

    def test_dispose_cancels_pending(self, fake_loop, calls):
        d = _debounce(fake_loop)
        d.call(lambda: calls.append(1))
        d.dispose()
        fake_loop.advance(0.2)
        assert calls == []
        assert fake_loop.pending_timers == 0

    def test_dispose_is_idempotent(self, fake_loop):
        d = _debounce(fake_loop)
        d.dispose()
        d.dispose()
        assert d.is_active is False

    def test_context_manager(self, fake_loop, calls):
        with _debounce(fake_loop) as d:
            d.call(lambda: calls.append(1))
        fake_loop.advance(0.2)
        assert calls == []
        assert d.is_active is False


class TestDebounceReentrancy:
    def test_call_from_trailing_callback_starts_new_window(self, fake_loop, calls):
        d = _debounce(fake_loop)

        def first():
            calls.append("first")
            d.call(lambda: calls.append("second"))

        d.call(first)
        fake_loop.advance(0.1)
        assert calls == ["first"]
        assert d.is_timer_active is True

        fake_loop.advance(0.1)
        assert calls == ["first", "second"]

    def test_call_from_leading_callback_is_suppressed(self, fake_loop, calls):
        d = _debounce(fake_loop, leading=True, trailing=False)

        def first():
            calls.append("first")
            d.call(lambda: calls.append("nested"))

        d.call(first)
        fake_loop.advance(0.2)
        assert calls == ["first"]


class TestDebounceWithEventLoop:
    async def test_uses_running_loop(self, calls):
        d = Debounce(0.02)
        d.call(lambda: calls.append(1))
        await asyncio.sleep(0.08)
        assert calls == [1]
        d.dispose()
