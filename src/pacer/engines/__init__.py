from pacer.engines.base import BaseEngine, Scheduler
from pacer.engines.debounce import Debounce
from pacer.engines.registry import build_engine
from pacer.engines.throttle import Throttle

__all__ = [
    "BaseEngine",
    "Debounce",
    "Scheduler",
    "Throttle",
    "build_engine",
]
