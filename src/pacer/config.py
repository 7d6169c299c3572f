"""Configuration types for the pacer library."""

from dataclasses import dataclass
from enum import StrEnum

MICROSECONDS_PER_SECOND = 1_000_000


class Kind(StrEnum):
    """Available call-rate engines.

    DEBOUNCE: Coalesce rapid calls into at most one firing per quiet period.
    THROTTLE: Cap firing rate to at most one per fixed interval.
    """

    DEBOUNCE = "debounce"
    THROTTLE = "throttle"


def interval_from_hz(hz: float) -> float:
    """Return the interval in seconds for a frequency, truncated to whole microseconds."""
    if hz <= 0:
        raise ValueError(f"hz must be positive, got {hz}")
    return int(MICROSECONDS_PER_SECOND // hz) / MICROSECONDS_PER_SECOND


@dataclass(frozen=True, slots=True)
class DebounceConfig:
    """Configuration for a Debounce engine.

    Attributes:
        delay: Quiet-period delay in seconds. The engine waits this long
               after the last call before a trailing firing.
        leading: Fire on the first call of a window.
        trailing: Fire the last call once the window has been quiet for ``delay``.
    """

    delay: float = 0.8
    leading: bool = False
    trailing: bool = True

    def __post_init__(self) -> None:
        if self.delay < 0:
            raise ValueError(f"delay must be non-negative, got {self.delay}")

    @property
    def kind(self) -> Kind:
        return Kind.DEBOUNCE


@dataclass(frozen=True, slots=True)
class ThrottleConfig:
    """Configuration for a Throttle engine.

    Attributes:
        interval: Window length in seconds; at most one firing per window.
        leading: Fire the first call of a window immediately.
        trailing: Fire the most recent call at the end of the window.
    """

    interval: float = 0.5
    leading: bool = True
    trailing: bool = False

    def __post_init__(self) -> None:
        if self.interval < 0:
            raise ValueError(f"interval must be non-negative, got {self.interval}")

    @property
    def kind(self) -> Kind:
        return Kind.THROTTLE

    @classmethod
    def from_hz(cls, hz: float, *, leading: bool = True, trailing: bool = False) -> "ThrottleConfig":
        return cls(interval=interval_from_hz(hz), leading=leading, trailing=trailing)


@dataclass(frozen=True, slots=True)
class BackOffConfig:
    """Configuration for a BackOff retry loop.

    With the defaults an operation is attempted up to 8 times, sleeping
    roughly 0.4, 0.8, 1.6, 3.2, 6.4, 12.8 and 25.6 seconds (each +/- 25%)
    between attempts.

    Attributes:
        initial_delay: Delay factor in seconds, doubled after every attempt.
        percentage_randomization: Fraction (0.0-1.0) by which each delay is
            randomly increased or decreased.
        max_delay: Upper bound for any single delay, in seconds.
        max_attempts: Total number of attempts, the first call included.
    """

    initial_delay: float = 0.2
    percentage_randomization: float = 0.25
    max_delay: float = 30.0
    max_attempts: int = 8

    def __post_init__(self) -> None:
        if self.initial_delay < 0:
            raise ValueError(f"initial_delay must be non-negative, got {self.initial_delay}")

        if self.max_delay < 0:
            raise ValueError(f"max_delay must be non-negative, got {self.max_delay}")

        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be greater than 0, got {self.max_attempts}")
