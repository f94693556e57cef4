"""settle - wait for remote resources to converge.

Poll a resource's status until it reaches a target state, fails, or
runs out of time, with cooperative cancellation.

Example:

    from settle import ProbeResult, WaitSpec, wait_for_state

    async def probe(name: str) -> ProbeResult[dict]:
        job = await api.get_job(name)
        return ProbeResult(state=job["status"], payload=job)

    job = await wait_for_state(
        WaitSpec(
            identifier="nightly-build",
            probe=probe,
            pending={"QUEUED", "RUNNING"},
            target={"SUCCEEDED"},
            poll_interval=5,
            timeout=600,
        ),
        extractor=lambda job: (job["errorCode"], job["errorMessage"]) if job and job.get("errorCode") else None,
    )
"""

# Configuration profiles
from settle.config import load_config, resolve_timing

# Cancellation
from settle.context import WaitContext

# Errors
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

# Outcome classification
from settle.enrich import enrich, enriched

# Logging
from settle.logging import LogConfig, logging_enabled, setup_logging, teardown_logging

# Wait spec
from settle.spec import WaitSpec, WaitTiming

# Types
from settle.types import Extractor, Outcome, OutcomeKind, Probe, ProbeResult, StateToken

# Waiter
from settle.wait import Waiter, wait_for_state, wait_for_state_sync

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "EnrichedFailureError",
    "Extractor",
    "LogConfig",
    "Outcome",
    "OutcomeKind",
    "Probe",
    "ProbeError",
    "ProbeResult",
    "ResourceNotFoundError",
    "SettleError",
    "StateToken",
    "UnexpectedStateError",
    "WaitCancelledError",
    "WaitContext",
    "WaitError",
    "WaitSpec",
    "WaitTimeoutError",
    "WaitTiming",
    "Waiter",
    "enrich",
    "enriched",
    "load_config",
    "logging_enabled",
    "resolve_timing",
    "setup_logging",
    "teardown_logging",
    "wait_for_state",
    "wait_for_state_sync",
]
