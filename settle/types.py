"""Shared types for the waiter and the outcome classifier."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "StateToken",
    "ProbeResult",
    "Probe",
    "Extractor",
    "OutcomeKind",
    "Outcome",
]

type StateToken = str
"""Opaque label for a resource's reported lifecycle state."""


@dataclass(frozen=True, slots=True)
class ProbeResult[P]:
    """Result of a single status probe.

    The payload slot is always present; a probe that has nothing to
    report beyond the state returns ``payload=None``.
    """

    state: StateToken
    payload: P | None = None


type Probe[P] = Callable[[str], Awaitable[ProbeResult[P]] | ProbeResult[P]]
"""Status reader: identifier in, ProbeResult out. May be sync or async.

Failures are raised, ResourceNotFoundError signalling an absent resource.
"""

type Extractor[P] = Callable[[P | None], tuple[str, str] | None]
"""Pulls a ``(code, message)`` diagnostic out of a payload, or None."""


class OutcomeKind(StrEnum):
    """Terminal states of the polling state machine."""

    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Outcome[P]:
    """Final result of one wait.

    Attributes:
        kind: How the wait ended.
        payload: Last payload observed (None if the resource is gone).
        state: Last state token observed, if any probe succeeded.
        error: Terminal error; None exactly when kind is SUCCESS.
        probes: Number of probe invocations issued.
        elapsed: Wall-clock seconds spent waiting.
    """

    kind: OutcomeKind
    payload: P | None = None
    state: StateToken | None = None
    error: BaseException | None = None
    probes: int = 0
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def unwrap(self) -> P | None:
        """Return the payload, or raise the terminal error."""
        if self.error is not None:
            raise self.error
        return self.payload

