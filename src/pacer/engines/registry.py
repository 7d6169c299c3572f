"""Maps each ``Kind`` enum member to a callable that builds an engine.

When you add a new engine:

1. Add a variant to the ``Kind`` enum in ``config.py`` and a config
   dataclass whose ``kind`` property returns it.
2. Add an entry to ``REGISTRY`` pointing to a factory function or lambda
   that constructs the concrete engine from that config.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pacer.config import DebounceConfig, Kind, ThrottleConfig
from pacer.engines.base import BaseEngine, Scheduler
from pacer.engines.debounce import Debounce
from pacer.engines.throttle import Throttle

EngineConfig = DebounceConfig | ThrottleConfig
EngineFactory = Callable[[Any, "Scheduler | None"], BaseEngine]

REGISTRY: dict[Kind, EngineFactory] = {
    Kind.DEBOUNCE: lambda cfg, loop: Debounce.from_config(cfg, loop=loop),
    Kind.THROTTLE: lambda cfg, loop: Throttle.from_config(cfg, loop=loop),
}


def build_engine(config: EngineConfig, *, loop: Scheduler | None = None) -> BaseEngine:
    """Resolve *config.kind* to a concrete engine instance."""
    factory = REGISTRY.get(config.kind)
    if not factory:
        raise ValueError(f"Unknown engine kind: {config.kind!r}. Registered: {', '.join(k.value for k in REGISTRY)}")
    return factory(config, loop)
