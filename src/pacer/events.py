"""Events that can cancel a pending debounce window."""

from abc import ABC, abstractmethod
from typing import Any


class ResettableEvent(ABC):
    """Capability for events that only cancel the previous deferred event.

    When ``reset_only_previous_event`` is ``True`` the debounce stream adapter
    resets its engine and drops the event: the pending event is cancelled and
    nothing new is scheduled. When ``False`` the event is processed as usual.

    Example::

        @dataclass(frozen=True)
        class SearchTextChanged(ResettableEvent):
            text: str
            reset_only_previous_event: bool = False
    """

    __slots__ = ()

    @property
    @abstractmethod
    def reset_only_previous_event(self) -> bool: ...


def is_reset_only(event: Any) -> bool:
    """Return ``True`` if *event* exposes ``reset_only_previous_event`` set to ``True``.

    The accessor is read directly, so any event type carrying the flag
    qualifies whether or not it subclasses :class:`ResettableEvent`.
    """
    return getattr(event, "reset_only_previous_event", False) is True
