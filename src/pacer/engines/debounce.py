"""Leading/trailing debounce engine."""

from __future__ import annotations

from pacer.config import DebounceConfig
from pacer.engines.base import BaseEngine, Callback, Scheduler


class Debounce(BaseEngine):
    """Coalesce rapid calls into at most one firing per quiet period.

    How it works:
        - Every call cancels and restarts the ``delay`` timer.
        - With ``leading``, the first call of a window fires immediately and
          suppresses the trailing firing for that window.
        - With ``trailing``, later calls are buffered (last one wins) and the
          buffered callback fires once the timer expires.

    Example::

        delay=1s (each dash is 0.5s)

        leading=False, trailing=True
        Input:  1-2-3---4---5-6-
        Output: ------3---4-----6

        leading=True, trailing=False
        Input:  1-2-3---4---5-6-
        Output: 1-------4---5---

        leading=True, trailing=True
        Input:  1-2-3---4---5-6-
        Output: 1-----3-4---5---6

    With both edges disabled the engine never fires anything.

    Args:
        delay: Quiet-period delay in seconds. Must be non-negative.
        leading: Fire on the first call of a window.
        trailing: Fire the last call after the window goes quiet.
        loop: Scheduler for the delay timer.
    """

    DEFAULT_DELAY = 0.8

    __slots__ = ("_has_called_leading", "_skip_trailing", "delay")

    def __init__(
        self,
        delay: float = DEFAULT_DELAY,
        *,
        leading: bool = False,
        trailing: bool = True,
        loop: Scheduler | None = None,
    ) -> None:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")

        super().__init__(leading=leading, trailing=trailing, loop=loop)
        self.delay = delay
        self._has_called_leading = False
        self._skip_trailing = False

    @classmethod
    def from_config(cls, config: DebounceConfig, *, loop: Scheduler | None = None) -> Debounce:
        return cls(config.delay, leading=config.leading, trailing=config.trailing, loop=loop)

    def call(self, callback: Callback) -> None:
        if self.is_not_active:
            return

        self._release_stale_window()

        self._cancel_timer()

        fire_now = False
        if self.leading and not self._has_called_leading:
            self._has_called_leading = True
            self._skip_trailing = True
            fire_now = True
        elif self.trailing:
            self._skip_trailing = False
            self._pending = callback

        self._schedule(self.delay, self._on_timer)

        if fire_now:
            callback()

    def reset(self) -> None:
        self._cancel_timer()
        self._pending = None
        self._has_called_leading = False
        self._skip_trailing = False

    def flush(self) -> None:
        if self.is_not_active or self._timer_handle is None or self._pending is None:
            return
        callback = self._pending
        self.reset()
        callback()

    def _on_timer(self) -> None:
        self._timer_handle = None
        callback = None
        if self.trailing and not self._skip_trailing and self.is_active:
            callback = self._pending

        # window closes before the callback runs so re-entrant calls start a new one
        self._pending = None
        self._has_called_leading = False
        self._skip_trailing = False

        if callback is not None:
            callback()

    def __repr__(self) -> str:
        return (
            f"Debounce(delay={self.delay}, leading={self.leading}, "
            f"trailing={self.trailing}, disposed={self._disposed})"
        )
