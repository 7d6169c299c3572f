"""Host lifecycle contract for objects that own engines.

A host (a view model, a service, a UI controller) that owns engines must
dispose each of them exactly once during its own teardown. Rather than
mixing that into every possible host base class, hosts implement
:class:`EngineOwner` and call :meth:`EngineOwner.dispose_engines` from
wherever their framework tears them down.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import cached_property
from typing import ClassVar, Protocol, runtime_checkable

from pacer.config import DebounceConfig, ThrottleConfig
from pacer.engines.debounce import Debounce
from pacer.engines.throttle import Throttle


@runtime_checkable
class Disposable(Protocol):
    def dispose(self) -> None: ...


class EngineOwner:
    """Capability for hosts that own one or more engines.

    Subclasses override :meth:`owned_engines`, extending ``super()``'s
    result so that several owners compose.

    Example::

        class SearchViewModel(EngineOwner):
            def __init__(self) -> None:
                self._debounce = Debounce(0.3)

            def owned_engines(self) -> list[Disposable]:
                return [*super().owned_engines(), self._debounce]

            def close(self) -> None:
                self.dispose_engines()
    """

    def owned_engines(self) -> Iterable[Disposable]:
        """Return the engines this host is responsible for disposing."""
        return ()

    def dispose_engines(self) -> None:
        """Dispose every owned engine. Safe to call more than once."""
        for engine in self.owned_engines():
            engine.dispose()


class DebounceMixin(EngineOwner):
    """Give a host a lazily built :class:`Debounce` configured by ``debounce_config``.

    Example::

        class SearchBox(DebounceMixin):
            debounce_config = DebounceConfig(delay=0.3)

            def on_text_changed(self, text: str) -> None:
                self.debounce(lambda: self.search(text))

            def close(self) -> None:
                self.dispose_engines()
    """

    debounce_config: ClassVar[DebounceConfig] = DebounceConfig()

    @cached_property
    def debounce(self) -> Debounce:
        return Debounce.from_config(self.debounce_config)

    def owned_engines(self) -> Iterable[Disposable]:
        engines = list(super().owned_engines())
        # only an engine the host actually built needs disposing
        if "debounce" in self.__dict__:
            engines.append(self.debounce)
        return engines


class ThrottleMixin(EngineOwner):
    """Give a host a lazily built :class:`Throttle` configured by ``throttle_config``."""

    throttle_config: ClassVar[ThrottleConfig] = ThrottleConfig()

    @cached_property
    def throttle(self) -> Throttle:
        return Throttle.from_config(self.throttle_config)

    def owned_engines(self) -> Iterable[Disposable]:
        engines = list(super().owned_engines())
        if "throttle" in self.__dict__:
            engines.append(self.throttle)
        return engines
