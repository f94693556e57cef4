"""Wait specification.

A WaitSpec describes one wait: which probe to call, which states mean
"keep polling" and which mean "done", and how long to keep trying.
Specs are immutable and built per call; nothing here is process-wide.

Example:
    spec = WaitSpec(
        identifier=arn,
        probe=cluster_state_probe(client),
        pending={"CREATING"},
        target={"ACTIVE"},
        poll_interval=30,
        timeout=3600,
    )
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field, replace
from typing import Any

from settle.constants import DEFAULT_POLL_INTERVAL
from settle.core.exceptions import ConfigurationError
from settle.types import Probe, StateToken

__all__ = ["WaitSpec", "WaitTiming"]


def _check(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


def _validate_timing(
    poll_interval: float,
    timeout: float,
    delay: float,
    min_interval: float,
    backoff: float,
    max_interval: float | None,
    not_found_checks: int,
    continuous_target_occurrence: int,
) -> None:
    _check(poll_interval > 0, f"poll_interval must be > 0, got {poll_interval}")
    _check(timeout >= 0, f"timeout must be >= 0, got {timeout}")
    _check(delay >= 0, f"delay must be >= 0, got {delay}")
    _check(min_interval >= 0, f"min_interval must be >= 0, got {min_interval}")
    _check(backoff >= 1, f"backoff must be >= 1, got {backoff}")
    _check(
        max_interval is None or max_interval >= poll_interval,
        f"max_interval must be >= poll_interval, got {max_interval}",
    )
    _check(not_found_checks >= 0, f"not_found_checks must be >= 0, got {not_found_checks}")
    _check(
        continuous_target_occurrence >= 1,
        f"continuous_target_occurrence must be >= 1, got {continuous_target_occurrence}",
    )


@dataclass(frozen=True, slots=True)
class WaitTiming:
    """Tuning knobs of a wait, separable from what is being waited on.

    Attributes:
        poll_interval: Seconds between probes.
        timeout: Maximum seconds to wait; 0 means no deadline.
        delay: Seconds to sleep before the first probe.
        min_interval: Floor applied to every sleep.
        backoff: Multiplier applied to the interval after each sleep.
        max_interval: Cap for the backed-off interval.
        not_found_checks: NotFound probes tolerated while a target is awaited.
        continuous_target_occurrence: Consecutive target hits required.
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: float = 0.0
    delay: float = 0.0
    min_interval: float = 0.0
    backoff: float = 1.0
    max_interval: float | None = None
    not_found_checks: int = 0
    continuous_target_occurrence: int = 1

    def __post_init__(self) -> None:
        _validate_timing(**asdict(self))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class WaitSpec[P]:
    """Caller-supplied configuration for one wait.

    ``pending`` and ``target`` must be disjoint. An empty ``target`` means
    the wait succeeds once the probe reports the resource as not found.
    When both are empty, the first successful probe satisfies the wait.
    """

    identifier: str
    probe: Probe[P]
    pending: frozenset[StateToken] = field(default_factory=frozenset)
    target: frozenset[StateToken] = field(default_factory=frozenset)
    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: float = 0.0
    delay: float = 0.0
    min_interval: float = 0.0
    backoff: float = 1.0
    max_interval: float | None = None
    not_found_checks: int = 0
    continuous_target_occurrence: int = 1

    def __post_init__(self) -> None:
        pending = _states(self.pending)
        target = _states(self.target)
        object.__setattr__(self, "pending", pending)
        object.__setattr__(self, "target", target)

        overlap = pending & target
        _check(not overlap, f"pending and target states overlap: {sorted(overlap)}")
        _check(callable(self.probe), "probe must be callable")
        _validate_timing(
            self.poll_interval,
            self.timeout,
            self.delay,
            self.min_interval,
            self.backoff,
            self.max_interval,
            self.not_found_checks,
            self.continuous_target_occurrence,
        )

    @property
    def timing(self) -> WaitTiming:
        return WaitTiming(
            poll_interval=self.poll_interval,
            timeout=self.timeout,
            delay=self.delay,
            min_interval=self.min_interval,
            backoff=self.backoff,
            max_interval=self.max_interval,
            not_found_checks=self.not_found_checks,
            continuous_target_occurrence=self.continuous_target_occurrence,
        )

    def with_timing(self, timing: WaitTiming) -> WaitSpec[P]:
        """Return a copy of this spec using the given timing."""
        return replace(self, **timing.to_dict())


def _states(states: Iterable[StateToken]) -> frozenset[StateToken]:
    if isinstance(states, str):
        return frozenset((states,))
    return frozenset(states)
