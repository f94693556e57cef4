"""Cooperative cancellation for waits.

A WaitContext is handed to a waiter by the caller. Cancelling it, or
letting its own deadline pass, makes the waiter stop at its next
suspension point (an in-flight probe or an inter-poll sleep) and
report a cancelled outcome. It is independent of WaitSpec.timeout.

Cancelling the asyncio task that runs the wait is a different thing:
that raises CancelledError through the waiter as usual.
"""

from __future__ import annotations

import asyncio
import time

__all__ = ["WaitContext"]

DEADLINE_EXCEEDED = "deadline exceeded"


class WaitContext:
    """Cancellation token with an optional deadline.

    Args:
        timeout: Seconds from now after which the context counts as done.
            None means no deadline.

    Must be cancelled from the event loop running the wait.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None
        self._deadline = None if timeout is None else time.monotonic() + timeout

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def reason(self) -> str | None:
        if self._reason is not None:
            return self._reason
        if self._expired():
            return DEADLINE_EXCEEDED
        return None

    def cancel(self, reason: str = "cancelled") -> None:
        if self._reason is None:
            self._reason = reason
        self._event.set()

    def done(self) -> bool:
        return self._event.is_set() or self._expired()

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    async def wait(self, seconds: float | None = None) -> bool:
        """Sleep up to ``seconds``, waking early when the context is done.

        Returns:
            True if the context is done when the sleep ends.
        """
        limit = seconds
        remaining = self.remaining()
        if remaining is not None:
            limit = remaining if limit is None else min(limit, remaining)

        if not self.done():
            try:
                await asyncio.wait_for(self._event.wait(), timeout=limit)
            except TimeoutError:
                pass
        return self.done()

    def _expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline
