"""Core building blocks shared by every waiter."""

from settle.core.exceptions import (
    ConfigurationError,
    EnrichedFailureError,
    ProbeError,
    ResourceNotFoundError,
    SettleError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitError,
    WaitTimeoutError,
)

__all__ = [
    "ConfigurationError",
    "EnrichedFailureError",
    "ProbeError",
    "ResourceNotFoundError",
    "SettleError",
    "UnexpectedStateError",
    "WaitCancelledError",
    "WaitError",
    "WaitTimeoutError",
]
