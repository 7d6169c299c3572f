"""Pacer: debounce, throttle and backoff primitives for asyncio.

Provides leading/trailing debounce and throttle engines, stream adapters
that apply them to async iterables, and a randomized exponential backoff
retry loop.

Basic usage:

    from pacer import Debounce, Throttle

    debounce = Debounce(0.3)
    debounce(lambda: search("hello"))  # runs 0.3s after the last call

    throttle = Throttle.from_60hz()
    throttle(redraw)  # runs at most 60 times per second

Streams:

    from pacer import DebounceStreamTransformer

    async for query in DebounceStreamTransformer(0.3).bind(keystrokes()):
        await search(query)

Retry:

    from pacer import BackOff

    body = await BackOff(fetch_page, max_attempts=5)()
"""

from pacer.backoff import BackOff
from pacer.config import BackOffConfig, DebounceConfig, Kind, ThrottleConfig
from pacer.decorator import debounce, retry, throttle
from pacer.engines.base import BaseEngine, Scheduler
from pacer.engines.debounce import Debounce
from pacer.engines.registry import build_engine
from pacer.engines.throttle import Throttle
from pacer.events import ResettableEvent, is_reset_only
from pacer.lifecycle import DebounceMixin, Disposable, EngineOwner, ThrottleMixin
from pacer.streams import (
    DebounceStreamTransformer,
    EventMapper,
    EventTransformer,
    ThrottleStreamTransformer,
    debounce_transform,
    throttle_transform,
)

__all__ = [
    "BackOff",
    "BackOffConfig",
    "BaseEngine",
    "Debounce",
    "DebounceConfig",
    "DebounceMixin",
    "DebounceStreamTransformer",
    "Disposable",
    "EngineOwner",
    "EventMapper",
    "EventTransformer",
    "Kind",
    "ResettableEvent",
    "Scheduler",
    "Throttle",
    "ThrottleConfig",
    "ThrottleMixin",
    "ThrottleStreamTransformer",
    "build_engine",
    "debounce",
    "debounce_transform",
    "is_reset_only",
    "retry",
    "throttle",
    "throttle_transform",
]

__version__ = "0.1.0"
