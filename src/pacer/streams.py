"""Stream adapters that apply Debounce and Throttle to async iterables.

Each adapter owns one engine. Binding it to an upstream async iterable
yields a downstream async iterator of the items the engine lets through:

    adapter = DebounceStreamTransformer(delay=0.5)

    async for query in adapter.bind(keystrokes()):
        await search(query)

Upstream exceptions reach the consumer after every item fired before them.
Upstream completion, or the consumer losing interest (``break``,
``aclose()``, cancellation), resets the engine and releases the upstream
iterator.

Fired items wait in an unbounded buffer by default, and the upstream is read
as fast as it produces. A consumer slower than the firing rate (or a zero
interval) makes that buffer grow. Pass ``max_buffered`` to stop reading the
upstream while that many fired items are waiting; items fired by an already
running timer can still push the buffer past the limit.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable
from contextlib import aclosing
from functools import partial
from typing import Any, Generic, NamedTuple, TypeVar

from pacer.engines.base import BaseEngine, Scheduler
from pacer.engines.debounce import Debounce
from pacer.engines.throttle import Throttle
from pacer.events import is_reset_only

logger = logging.getLogger(__name__)

T = TypeVar("T")

EventMapper = Callable[[T], AsyncIterable[T]]
"""Converts one incoming event into an outbound async iterable."""

EventTransformer = Callable[[AsyncIterable[T], EventMapper[T]], AsyncIterator[T]]
"""Changes how a sequence of events is handed to an :data:`EventMapper`."""

_DONE = object()


class _Item(NamedTuple):
    value: Any


class _Failure(NamedTuple):
    error: Exception


async def _rate_limited(
    source: AsyncIterable[T],
    engine: BaseEngine,
    reset_when: Callable[[T], bool] | None = None,
    max_buffered: int = 0,
) -> AsyncIterator[T]:
    """Pump *source* through *engine* and yield whatever it fires.

    A background task drains the upstream so that engine timers keep
    running while the consumer is waiting. Fired items are handed over
    through a queue, preserving arrival order. With *max_buffered* set the
    pump stops pulling from *source* while the queue holds that many items.
    """
    queue: asyncio.Queue[Any] = asyncio.Queue()
    room = asyncio.Event()
    room.set()
    closed = False

    def emit(item: T) -> None:
        if not closed:
            queue.put_nowait(_Item(item))
            if max_buffered and queue.qsize() >= max_buffered:
                room.clear()

    async def pump() -> None:
        iterator = aiter(source)
        try:
            async for item in iterator:
                if reset_when is not None and reset_when(item):
                    engine.reset()
                    continue
                engine.call(partial(emit, item))
                await room.wait()
        except Exception as exc:
            queue.put_nowait(_Failure(exc))
        finally:
            engine.reset()
            queue.put_nowait(_DONE)
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()

    task = asyncio.get_running_loop().create_task(pump())
    try:
        while True:
            entry = await queue.get()
            if queue.qsize() < max_buffered:
                room.set()
            if entry is _DONE:
                return
            if isinstance(entry, _Failure):
                raise entry.error
            yield entry.value
    finally:
        closed = True
        engine.reset()
        if not task.done():
            logger.debug("Downstream closed early, cancelling upstream of %r", engine)
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


class DebounceStreamTransformer(Generic[T]):
    """Apply a :class:`~pacer.engines.debounce.Debounce` to an async iterable.

    Items implementing :class:`~pacer.events.ResettableEvent` with
    ``reset_only_previous_event`` set cancel the pending item and are never
    emitted themselves.

    Args:
        delay: Quiet-period delay in seconds.
        leading: Emit the first item of a window immediately.
        trailing: Emit the last item once the window goes quiet.
        loop: Scheduler for the engine's timer.
        max_buffered: Stop reading the upstream while this many fired items
            wait for the consumer. ``0`` means unbounded.
    """

    __slots__ = ("_debounce", "max_buffered")

    def __init__(
        self,
        delay: float = Debounce.DEFAULT_DELAY,
        *,
        leading: bool = False,
        trailing: bool = True,
        loop: Scheduler | None = None,
        max_buffered: int = 0,
    ) -> None:
        if max_buffered < 0:
            raise ValueError(f"max_buffered must be non-negative, got {max_buffered}")

        self.max_buffered = max_buffered
        self._debounce = Debounce(delay, leading=leading, trailing=trailing, loop=loop)

    @property
    def engine(self) -> Debounce:
        return self._debounce

    def bind(self, source: AsyncIterable[T]) -> AsyncIterator[T]:
        return _rate_limited(source, self._debounce, reset_when=is_reset_only, max_buffered=self.max_buffered)

    __call__ = bind


class ThrottleStreamTransformer(Generic[T]):
    """Apply a :class:`~pacer.engines.throttle.Throttle` to an async iterable.

    Every item is submitted to the engine; resettable events get no special
    treatment.

    Args:
        interval: Window length in seconds.
        leading: Emit the first item of a window immediately.
        trailing: Emit the most recent item at the end of a window.
        loop: Scheduler for the engine's timer.
        max_buffered: Stop reading the upstream while this many fired items
            wait for the consumer. ``0`` means unbounded.
    """

    __slots__ = ("_throttle", "max_buffered")

    def __init__(
        self,
        interval: float = Throttle.INTERVAL_2HZ,
        *,
        leading: bool = True,
        trailing: bool = False,
        loop: Scheduler | None = None,
        max_buffered: int = 0,
    ) -> None:
        if max_buffered < 0:
            raise ValueError(f"max_buffered must be non-negative, got {max_buffered}")

        self.max_buffered = max_buffered
        self._throttle = Throttle(interval, leading=leading, trailing=trailing, loop=loop)

    @property
    def engine(self) -> Throttle:
        return self._throttle

    def bind(self, source: AsyncIterable[T]) -> AsyncIterator[T]:
        return _rate_limited(source, self._throttle, max_buffered=self.max_buffered)

    __call__ = bind


async def _expand(
    adapter: DebounceStreamTransformer[T] | ThrottleStreamTransformer[T],
    events: AsyncIterable[T],
    mapper: EventMapper[T],
) -> AsyncIterator[T]:
    try:
        async with aclosing(adapter.bind(events)) as limited:
            async for event in limited:
                async for result in mapper(event):
                    yield result
    finally:
        adapter.engine.dispose()


def debounce_transform(
    delay: float = Debounce.DEFAULT_DELAY,
    *,
    leading: bool = False,
    trailing: bool = True,
    loop: Scheduler | None = None,
) -> EventTransformer[Any]:
    """Build an event transformer that debounces events before mapping them.

    Each surviving event is expanded through the mapper, one at a time, in
    order. Every invocation of the returned transformer owns a fresh engine.

    Example::

        transformer = debounce_transform(delay=0.5)

        async for state in transformer(events, on_search):
            render(state)
    """

    def transformer(events: AsyncIterable[Any], mapper: EventMapper[Any]) -> AsyncIterator[Any]:
        adapter: DebounceStreamTransformer[Any] = DebounceStreamTransformer(
            delay, leading=leading, trailing=trailing, loop=loop
        )
        return _expand(adapter, events, mapper)

    return transformer


def throttle_transform(
    interval: float = Throttle.INTERVAL_2HZ,
    *,
    leading: bool = True,
    trailing: bool = False,
    loop: Scheduler | None = None,
) -> EventTransformer[Any]:
    """Build an event transformer that throttles events before mapping them."""

    def transformer(events: AsyncIterable[Any], mapper: EventMapper[Any]) -> AsyncIterator[Any]:
        adapter: ThrottleStreamTransformer[Any] = ThrottleStreamTransformer(
            interval, leading=leading, trailing=trailing, loop=loop
        )
        return _expand(adapter, events, mapper)

    return transformer
