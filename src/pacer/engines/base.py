"""Abstract base class shared by the timer-driven engines."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from asyncio import get_running_loop
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], Any]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can invoke a callback once after a delay.

    ``asyncio.AbstractEventLoop`` satisfies this protocol.
    """

    def call_later(self, delay: float, callback: Callable[..., Any], /) -> TimerHandle: ...


class BaseEngine(ABC):
    """Base class for Debounce and Throttle.

    Owns at most one timer handle and implements the dispose contract:
    :meth:`dispose` is idempotent and turns :meth:`call` and :meth:`flush`
    into silent no-ops.

    Subclasses must implement :meth:`call`, :meth:`reset` and :meth:`flush`.

    Args:
        leading: Fire at the start of a window.
        trailing: Fire at the end of a window.
        loop: Scheduler used for timers. Defaults to whichever event loop is
              running when a timer is scheduled. A window left open on a
              different loop is dropped before the next call is handled.
    """

    __slots__ = ("_disposed", "_loop", "_pending", "_timer_handle", "_timer_loop", "leading", "trailing")

    def __init__(
        self,
        *,
        leading: bool,
        trailing: bool,
        loop: Scheduler | None = None,
    ) -> None:
        self.leading = leading
        self.trailing = trailing
        self._loop = loop
        self._timer_handle: TimerHandle | None = None
        self._timer_loop: Scheduler | None = None
        self._pending: Callback | None = None
        self._disposed = False

    @property
    def is_active(self) -> bool:
        """``True`` until :meth:`dispose` is called."""
        return not self._disposed

    @property
    def is_not_active(self) -> bool:
        """``True`` when disposed or when both edges are disabled."""
        return self._disposed or (not self.leading and not self.trailing)

    @property
    def is_timer_active(self) -> bool:
        return self._timer_handle is not None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @abstractmethod
    def call(self, callback: Callback) -> None:
        """Submit *callback*; the engine decides to fire, buffer or drop it."""

    @abstractmethod
    def reset(self) -> None:
        """Cancel the timer and clear pending state without firing anything."""

    @abstractmethod
    def flush(self) -> None:
        """Fire the pending trailing callback now, if there is one."""

    def __call__(self, callback: Callback) -> None:
        self.call(callback)

    def dispose(self) -> None:
        """Permanently deactivate the engine and release its timer."""
        if not self._disposed:
            logger.debug("Disposing %r", self)
        self._disposed = True
        self.reset()

    def __enter__(self) -> BaseEngine:
        return self

    def __exit__(self, *_: Any) -> None:
        self.dispose()

    def _get_loop(self) -> Scheduler:
        if self._loop is not None:
            return self._loop
        return get_running_loop()

    def _release_stale_window(self) -> None:
        """Reset when the open window belongs to a loop other than the running one."""
        if self._loop is not None or self._timer_loop is None:
            return
        if self._timer_loop is not get_running_loop():
            logger.debug("Dropping window of %r left on another event loop", self)
            self.reset()

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        loop = self._get_loop()
        self._timer_handle = loop.call_later(delay, callback)
        self._timer_loop = loop

    def _cancel_timer(self) -> None:
        if self._timer_handle is not None:
            self._timer_handle.cancel()
            self._timer_handle = None
        self._timer_loop = None
