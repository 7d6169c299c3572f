"""Decorator API for applying debounce, throttle and retry behavior to functions."""

import inspect
from collections.abc import Awaitable, Callable
from functools import partial, wraps
from typing import Any, TypeVar, cast, overload

from pacer.backoff import BackOff, RetryPredicate
from pacer.config import BackOffConfig, DebounceConfig, ThrottleConfig
from pacer.engines.base import BaseEngine
from pacer.engines.debounce import Debounce
from pacer.engines.throttle import Throttle

F = TypeVar("F", bound=Callable[..., Any])
AF = TypeVar("AF", bound=Callable[..., Awaitable[Any]])


def _engine_decorator(fn: Callable[..., Any], engine: BaseEngine, name: str) -> Callable[..., None]:
    if inspect.iscoroutinefunction(fn):
        raise TypeError(f"@{name} only supports sync function.")

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        engine.call(partial(fn, *args, **kwargs))

    wrapper.engine = engine  # type: ignore[attr-defined]
    wrapper.flush = engine.flush  # type: ignore[attr-defined]
    wrapper.reset = engine.reset  # type: ignore[attr-defined]
    wrapper.dispose = engine.dispose  # type: ignore[attr-defined]

    return wrapper


@overload
def debounce(
    func: F,
    /,
) -> F: ...


@overload
def debounce(
    *,
    delay: float = Debounce.DEFAULT_DELAY,
    leading: bool = False,
    trailing: bool = True,
) -> Callable[[F], F]: ...


def debounce(
    func: F | None = None,
    /,
    *,
    delay: float = Debounce.DEFAULT_DELAY,
    leading: bool = False,
    trailing: bool = True,
) -> F | Callable[[F], F]:
    """Decorator that debounces calls to a function.

    Each call of the decorated function is submitted to a private
    :class:`~pacer.engines.debounce.Debounce`; the wrapped function runs
    with the arguments of whichever call the engine fires. The wrapper
    always returns ``None``.

    Args:
        func: The function to decorate (when used without parentheses).
        delay: Quiet-period delay in seconds.
        leading: Run on the first call of a window.
        trailing: Run the last call once the window goes quiet.

    Examples:
    ```python
        @debounce(delay=0.3)
        def on_text_changed(text: str) -> None:
            search(text)

        on_text_changed("h")
        on_text_changed("he")  # only this one runs, 0.3s later
    ```
    """
    config = DebounceConfig(delay=delay, leading=leading, trailing=trailing)

    def decorator(fn: F) -> F:
        return cast("F", _engine_decorator(fn, Debounce.from_config(config), "debounce"))

    if func is not None:
        return decorator(func)

    return decorator


@overload
def throttle(
    func: F,
    /,
) -> F: ...


@overload
def throttle(
    *,
    interval: float = Throttle.INTERVAL_2HZ,
    leading: bool = True,
    trailing: bool = False,
) -> Callable[[F], F]: ...


def throttle(
    func: F | None = None,
    /,
    *,
    interval: float = Throttle.INTERVAL_2HZ,
    leading: bool = True,
    trailing: bool = False,
) -> F | Callable[[F], F]:
    """Decorator that throttles calls to a function.

    Works like :func:`debounce` but with a
    :class:`~pacer.engines.throttle.Throttle`: the function runs at most once
    per *interval*.
    """
    config = ThrottleConfig(interval=interval, leading=leading, trailing=trailing)

    def decorator(fn: F) -> F:
        return cast("F", _engine_decorator(fn, Throttle.from_config(config), "throttle"))

    if func is not None:
        return decorator(func)

    return decorator


@overload
def retry(
    func: AF,
    /,
) -> AF: ...


@overload
def retry(
    *,
    initial_delay: float = 0.2,
    percentage_randomization: float = 0.25,
    max_delay: float = 30.0,
    max_attempts: int = 8,
    retry_if: RetryPredicate | None = None,
) -> Callable[[AF], AF]: ...


def retry(
    func: AF | None = None,
    /,
    *,
    initial_delay: float = 0.2,
    percentage_randomization: float = 0.25,
    max_delay: float = 30.0,
    max_attempts: int = 8,
    retry_if: RetryPredicate | None = None,
) -> AF | Callable[[AF], AF]:
    """Decorator that retries an async function with :class:`~pacer.backoff.BackOff`.

    Every call of the decorated function runs its own retry loop.

    Examples:
    ```python
        @retry(max_attempts=3, retry_if=lambda error, attempt: isinstance(error, OSError))
        async def fetch(url: str) -> bytes:
            ...
    ```
    """
    config = BackOffConfig(
        initial_delay=initial_delay,
        percentage_randomization=percentage_randomization,
        max_delay=max_delay,
        max_attempts=max_attempts,
    )

    def decorator(fn: AF) -> AF:
        if not inspect.iscoroutinefunction(fn):
            raise TypeError("@retry only supports async function.")

        @wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await BackOff.from_config(partial(fn, *args, **kwargs), config, retry_if=retry_if)()

        wrapper.config = config  # type: ignore[attr-defined]

        return cast("AF", wrapper)

    if func is not None:
        return decorator(func)

    return decorator
