"""Exponential-backoff retry decorator for async callables.

Usage::

    from src.utils.retry import retry

    @retry(max_attempts=5, base_delay=1.0, exceptions=(ApiError,), backoff_on=(RateLimitedError,))
    async def flaky_request():
        ...

With ``backoff_on`` set, only those exception types wait before the next
attempt; every other retryable failure is re-attempted immediately.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import random
from typing import Awaitable, Callable, ParamSpec, TypeVar

import structlog

P = ParamSpec("P")
T = TypeVar("T")

log = structlog.stdlib.get_logger(__name__)


def compute_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Return the back-off duration for the given *attempt* (0-indexed).

    Formula: ``min(base_delay * 2^attempt + jitter, max_delay)``
    where *jitter* is uniform in ``[0, base_delay)``.
    """
    exp = base_delay * (2 ** attempt)
    jitter = random.random() * base_delay
    return min(exp + jitter, max_delay)


def retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exceptions: tuple[type[BaseException], ...] = (Exception,),
    backoff_on: tuple[type[BaseException], ...] | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator factory that retries the wrapped coroutine function on failure.

    Parameters
    ----------
    max_attempts:
        Total number of attempts (including the first call).  Must be >= 1.
    base_delay:
        Initial delay in seconds before the first backed-off retry.
    max_delay:
        Upper cap on the computed delay.
    exceptions:
        Exception types that trigger a retry.  Anything else propagates
        immediately.
    backoff_on:
        Subset of *exceptions* that sleep before retrying.  ``None`` means
        every retryable exception backs off.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"retry() requires a coroutine function, got {func!r}")

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as exc:
                    if attempt + 1 == max_attempts:
                        log.error(
                            "retry.exhausted",
                            func=func.__qualname__,
                            attempt=attempt + 1,
                            max_attempts=max_attempts,
                            error=str(exc),
                            error_type=type(exc).__name__,
                        )
                        raise
                    if backoff_on is None or isinstance(exc, backoff_on):
                        delay = compute_delay(attempt, base_delay, max_delay)
                    else:
                        delay = 0.0
                    log.warning(
                        "retry.attempt",
                        func=func.__qualname__,
                        attempt=attempt + 1,
                        max_attempts=max_attempts,
                        delay=round(delay, 2),
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                    if delay > 0:
                        await asyncio.sleep(delay)

            raise AssertionError("unreachable")  # pragma: no cover

        return wrapper

    return decorator
