"""Retry helpers for probe authors.

The waiter never retries a failing probe: a probe error ends the wait.
Probes that talk to flaky control planes should therefore absorb
transient failures themselves. This module wraps tenacity with
predicates suited to cloud APIs.

Example:
    from settle.retry import retry, on_error_code

    @retry(on=on_error_code("ThrottlingException"))
    async def probe(arn: str) -> ProbeResult[dict]:
        ...

    @retry(on=lambda e: "timeout" in str(e).lower(), max_attempts=3)
    async def slow_probe(name: str) -> ProbeResult[dict]:
        ...

A ResourceNotFoundError is never retried, whatever the predicate says:
absence is an answer, not a transient failure.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from loguru import logger
from tenacity import (
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)
from tenacity import retry as _tenacity_retry

from settle.core.exceptions import ResourceNotFoundError

P = ParamSpec("P")
T = TypeVar("T")

# Type for the retry predicate
RetryPredicate = Callable[[Exception], bool]


def retry(
    on: type[Exception] | tuple[type[Exception], ...] | RetryPredicate = Exception,
    max_attempts: int = 5,
    base_delay: float = 1.0,
    exponential_base: float = 2.0,
    max_delay: float = 20.0,
    jitter: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator that retries async functions with exponential backoff.

    Args:
        on: When to retry. Can be:
            - An exception class (retry on that exception and subclasses)
            - A tuple of exception classes (retry on any of them)
            - A callable predicate (retry when predicate returns True)
            Default: retry on any Exception.
        max_attempts: Maximum number of attempts (including the first one).
        base_delay: Delay in seconds before the first retry.
        exponential_base: Multiplier for exponential backoff.
            Delay formula: min(base_delay * (exponential_base ** attempt), max_delay)
        max_delay: Maximum delay cap in seconds.
        jitter: Whether to add random jitter (up to 10% of base_delay).

    Returns:
        Decorated async function with retry behavior. The last exception
        is re-raised once attempts are exhausted.
    """
    if isinstance(on, type) and issubclass(on, Exception):
        should_retry: RetryPredicate = lambda e: isinstance(e, on)
    elif isinstance(on, tuple):
        should_retry = lambda e: isinstance(e, on)
    else:
        should_retry = on

    def retryable(e: BaseException) -> bool:
        if not isinstance(e, Exception) or isinstance(e, ResourceNotFoundError):
            return False
        return should_retry(e)

    def log_retry(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        delay = state.next_action.sleep if state.next_action else 0.0
        logger.warning(
            f"Retry {state.attempt_number}/{max_attempts} after {type(error).__name__}: "
            f"{error}. Waiting {delay:.1f}s..."
        )

    wait = wait_exponential(multiplier=base_delay, exp_base=exponential_base, max=max_delay)
    if jitter:
        wait = wait + wait_random(0, base_delay * 0.1)

    return _tenacity_retry(  # type: ignore[return-value]
        retry=retry_if_exception(retryable),
        stop=stop_after_attempt(max_attempts),
        wait=wait,
        before_sleep=log_retry,
        reraise=True,
    )


# =============================================================================
# Common Predicates
# =============================================================================


def on_error_code(*codes: str) -> RetryPredicate:
    """Create a predicate that retries on specific AWS error codes.

    Works with botocore's ClientError and anything else exposing a
    ``response`` mapping shaped like ``{"Error": {"Code": ...}}``.

    Example:
        @retry(on=on_error_code("ThrottlingException", "TooManyRequestsException"))
        async def describe():
            ...
    """

    def predicate(e: Exception) -> bool:
        response = getattr(e, "response", None)
        if not isinstance(response, dict):
            return False
        return response.get("Error", {}).get("Code") in codes

    return predicate


def on_exception_message(*patterns: str, case_sensitive: bool = False) -> RetryPredicate:
    """Create a predicate that retries when exception message matches patterns.

    Example:
        @retry(on=on_exception_message("timeout", "connection reset"))
        async def network_call():
            ...
    """

    def predicate(e: Exception) -> bool:
        msg = str(e)
        if not case_sensitive:
            msg = msg.lower()
            return any(p.lower() in msg for p in patterns)
        return any(p in msg for p in patterns)

    return predicate


# =============================================================================
# Combining Predicates
# =============================================================================


def any_of(*predicates: RetryPredicate) -> RetryPredicate:
    """Combine predicates with OR logic (retry if ANY predicate matches)."""

    def combined(e: Exception) -> bool:
        return any(p(e) for p in predicates)

    return combined


def all_of(*predicates: RetryPredicate) -> RetryPredicate:
    """Combine predicates with AND logic (retry only if ALL predicates match).

    Example:
        @retry(on=all_of(
            lambda e: isinstance(e, ClientError),
            on_error_code("ThrottlingException"),
        ))
        async def specific_retry():
            ...
    """

    def combined(e: Exception) -> bool:
        return all(p(e) for p in predicates)

    return combined
