"""Custom exception hierarchy for settle.

All settle-specific exceptions inherit from SettleError, enabling
users to catch all settle exceptions with a single except clause.
Every error that ends a wait derives from WaitError and carries the
last payload and state the waiter observed, so callers can inspect
the resource even when the wait failed.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def _join(states: Iterable[str]) -> str:
    return ", ".join(sorted(states))


class SettleError(Exception):
    """Base exception for all settle errors."""


class ConfigurationError(SettleError):
    """Raised for an invalid wait spec or configuration file."""


class WaitError(SettleError):
    """Base exception for every terminal wait failure.

    Attributes:
        payload: Last payload returned by the probe, if any.
        state: Last state token observed, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        payload: Any = None,
        state: str | None = None,
    ) -> None:
        self.payload = payload
        self.state = state
        super().__init__(message)


class ProbeError(WaitError):
    """Raised when the status probe itself fails - not retried by the waiter."""


class ResourceNotFoundError(ProbeError):
    """Raised by a probe when the resource does not exist (anymore)."""


class UnexpectedStateError(WaitError):
    """Raised when the resource reports a state that is neither pending nor target."""

    def __init__(
        self,
        state: str,
        expected: Iterable[str],
        *,
        payload: Any = None,
        message: str | None = None,
    ) -> None:
        self.expected = frozenset(expected)
        super().__init__(
            message or f"unexpected state '{state}', wanted target '{_join(self.expected)}'",
            payload=payload,
            state=state,
        )


class EnrichedFailureError(UnexpectedStateError):
    """An unexpected state whose payload carried the resource's own diagnostic."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        state: str,
        expected: Iterable[str] = (),
        payload: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        super().__init__(state, expected, payload=payload, message=f"{code}: {message}")


class WaitTimeoutError(WaitError):
    """Raised when the wait exceeds its timeout while still pending."""

    def __init__(
        self,
        timeout: float,
        expected: Iterable[str],
        *,
        payload: Any = None,
        state: str | None = None,
    ) -> None:
        self.timeout = timeout
        self.expected = frozenset(expected)
        if self.expected:
            what = f"state to become '{_join(self.expected)}'"
        else:
            what = "resource to be gone"
        super().__init__(
            f"timeout while waiting for {what} "
            f"(last state: '{state or ''}', timeout: {timeout:g}s)",
            payload=payload,
            state=state,
        )


class WaitCancelledError(WaitError):
    """Raised when the wait context is cancelled or its deadline passes."""

    def __init__(
        self,
        identifier: str,
        reason: str = "cancelled",
        *,
        payload: Any = None,
        state: str | None = None,
    ) -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(
            f"wait for {identifier} aborted: {reason} (last state: '{state or ''}')",
            payload=payload,
            state=state,
        )
