"""Leading/trailing throttle engine."""

from __future__ import annotations

from pacer.config import ThrottleConfig, interval_from_hz
from pacer.engines.base import BaseEngine, Callback, Scheduler


class Throttle(BaseEngine):
    """Let a callback through at most once per ``interval``.

    How it works:
        - The first call while idle starts the interval timer. With
          ``leading`` it fires immediately; otherwise, with ``trailing``, it
          is buffered.
        - Calls while throttling replace the buffered callback when
          ``trailing`` is set (last call wins) and are dropped otherwise.
        - On expiry a buffered callback fires and the timer re-arms, so
          sustained activity yields one trailing firing per interval.
          Without a buffered callback the engine goes back to idle.

    Example::

        interval=6s (each dash is 2s)

        leading=True, trailing=False
        Input:  1-2-3---4-5-6---7-8-
        Output: 1-------4-------7---

        leading=False, trailing=True
        Input:  1-2-3---4-5----6--
        Output: ------3-----5-----6

        leading=True, trailing=True
        Input:  1-2-----3-----4
        Output: 1-----2-----3--

    With both edges disabled the engine never fires anything.

    Args:
        interval: Window length in seconds. Must be non-negative.
        leading: Fire the first call of a window immediately.
        trailing: Fire the most recent call at the end of a window.
        loop: Scheduler for the interval timer.
    """

    INTERVAL_2HZ = interval_from_hz(2)

    __slots__ = ("_is_throttling", "interval")

    def __init__(
        self,
        interval: float = INTERVAL_2HZ,
        *,
        leading: bool = True,
        trailing: bool = False,
        loop: Scheduler | None = None,
    ) -> None:
        if interval < 0:
            raise ValueError(f"interval must be non-negative, got {interval}")

        super().__init__(leading=leading, trailing=trailing, loop=loop)
        self.interval = interval
        self._is_throttling = False

    @classmethod
    def from_config(cls, config: ThrottleConfig, *, loop: Scheduler | None = None) -> Throttle:
        return cls(config.interval, leading=config.leading, trailing=config.trailing, loop=loop)

    @classmethod
    def from_hz(
        cls,
        hz: float,
        *,
        leading: bool = True,
        trailing: bool = False,
        loop: Scheduler | None = None,
    ) -> Throttle:
        """Build a throttle for an arbitrary frequency."""
        return cls(interval_from_hz(hz), leading=leading, trailing=trailing, loop=loop)

    @classmethod
    def from_24hz(cls, *, leading: bool = True, trailing: bool = False, loop: Scheduler | None = None) -> Throttle:
        """24 Hz, an interval of about 41.67 ms."""
        return cls.from_hz(24, leading=leading, trailing=trailing, loop=loop)

    @classmethod
    def from_48hz(cls, *, leading: bool = True, trailing: bool = False, loop: Scheduler | None = None) -> Throttle:
        """48 Hz, an interval of about 20.83 ms."""
        return cls.from_hz(48, leading=leading, trailing=trailing, loop=loop)

    @classmethod
    def from_60hz(cls, *, leading: bool = True, trailing: bool = False, loop: Scheduler | None = None) -> Throttle:
        """60 Hz, an interval of about 16.67 ms."""
        return cls.from_hz(60, leading=leading, trailing=trailing, loop=loop)

    @classmethod
    def from_120hz(cls, *, leading: bool = True, trailing: bool = False, loop: Scheduler | None = None) -> Throttle:
        """120 Hz, an interval of about 8.33 ms."""
        return cls.from_hz(120, leading=leading, trailing=trailing, loop=loop)

    @property
    def is_throttling(self) -> bool:
        return self._is_throttling

    def call(self, callback: Callback) -> None:
        if self.is_not_active:
            return

        self._release_stale_window()

        if self._is_throttling:
            if self.trailing:
                self._pending = callback
            return

        self._is_throttling = True
        if not self.leading:
            self._pending = callback
        self._schedule(self.interval, self._on_timer)

        if self.leading:
            callback()

    def reset(self) -> None:
        self._cancel_timer()
        self._pending = None
        self._is_throttling = False

    def flush(self) -> None:
        if self.is_not_active or not self._is_throttling or self._pending is None:
            return
        callback = self._pending
        self.reset()
        callback()

    def _on_timer(self) -> None:
        self._timer_handle = None
        callback = self._pending
        self._pending = None

        if self.trailing and self.is_active and callback is not None:
            self._schedule(self.interval, self._on_timer)
            callback()
            return

        self._is_throttling = False

    def __repr__(self) -> str:
        return (
            f"Throttle(interval={self.interval}, leading={self.leading}, "
            f"trailing={self.trailing}, disposed={self._disposed})"
        )
