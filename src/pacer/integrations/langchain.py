"""LangChain AgentMiddleware integration for the pacer library.

Provides :class:`BackOffMiddleware`, a LangChain ``AgentMiddleware`` that
retries failed model calls with randomized exponential backoff.

Example::

    from langchain.agents import create_agent
    from pacer.integrations.langchain import BackOffMiddleware

    middleware = BackOffMiddleware(max_attempts=4)

    agent = create_agent(
        model="gpt-4.1",
        tools=[...],
        middleware=[middleware],
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pacer.backoff import BackOff, RetryPredicate
from pacer.config import BackOffConfig

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from langchain.agents.middleware import ModelRequest, ModelResponse

    from pacer.backoff import RandomSource


class BackOffMiddleware:
    """LangChain ``AgentMiddleware`` that retries model calls.

    Intercepts ``awrap_model_call`` and runs the downstream handler inside a
    :class:`~pacer.backoff.BackOff`. Provider errors such as rate limits or
    dropped connections are retried with growing, jittered delays; once the
    attempts run out, or *retry_if* declines, the last error reaches the
    agent unchanged.

    Args:
        initial_delay: Delay factor in seconds, doubled after every attempt.
        percentage_randomization: Fraction each delay is randomized by.
        max_delay: Upper bound for a single delay, in seconds.
        max_attempts: Total attempts per model call.
        retry_if: ``retry_if(error, attempt)`` deciding whether to retry.
            ``None`` retries every error.
        rng: Random source for the jitter.

    Example::

        import openai

        agent = create_agent(
            model="gpt-4.1",
            tools=[...],
            middleware=[
                BackOffMiddleware(
                    max_attempts=5,
                    retry_if=lambda error, attempt: isinstance(error, openai.RateLimitError),
                )
            ],
        )
    """

    def __init__(
        self,
        initial_delay: float = 0.2,
        percentage_randomization: float = 0.25,
        max_delay: float = 30.0,
        max_attempts: int = 8,
        *,
        retry_if: RetryPredicate | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self._config = BackOffConfig(
            initial_delay=initial_delay,
            percentage_randomization=percentage_randomization,
            max_delay=max_delay,
            max_attempts=max_attempts,
        )
        self._retry_if = retry_if
        self._rng = rng

    @property
    def config(self) -> BackOffConfig:
        return self._config

    async def awrap_model_call(
        self,
        request: ModelRequest,
        handler: Callable[[ModelRequest], Awaitable[ModelResponse]],
    ) -> ModelResponse:
        """Call *handler* with *request*, retrying failures per the config."""
        backoff = BackOff.from_config(
            lambda: handler(request),
            self._config,
            retry_if=self._retry_if,
            rng=self._rng,
        )
        return await backoff()
