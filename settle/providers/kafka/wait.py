"""Waiters for Amazon MSK resources.

Thin WaitSpec presets over the generic waiter. Every waiter enriches a
failure with the diagnostic the resource reports, when it reports one.

Example:
    async with kafka_client("us-east-1") as client:
        cluster = await wait_cluster_created(client, arn, timeout=7200)
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from settle.constants import DEFAULT_NOT_FOUND_CHECKS
from settle.context import WaitContext
from settle.providers.kafka.states import (
    ClusterInfo,
    ClusterOperationInfo,
    ClusterOperationState,
    ClusterState,
    ConfigurationInfo,
    ConfigurationState,
    cluster_operation_error_info,
    cluster_state_info,
)
from settle.providers.kafka.status import (
    cluster_operation_state_probe,
    cluster_state_probe,
    configuration_state_probe,
)
from settle.spec import WaitSpec, WaitTiming
from settle.wait import wait_for_state

__all__ = [
    "wait_cluster_created",
    "wait_cluster_deleted",
    "wait_cluster_operation_completed",
    "wait_configuration_deleted",
]

DEFAULT_CLUSTER_TIMEOUT = 120 * 60.0
DEFAULT_CONFIGURATION_DELETED_TIMEOUT = 5 * 60.0


def _timing(timing: WaitTiming | None, timeout: float, *, not_found_checks: int = 0) -> WaitTiming:
    """Default timing, or the caller's with the not-found tolerance it left unset."""
    if timing is None:
        return WaitTiming(timeout=timeout, not_found_checks=not_found_checks)
    if timing.not_found_checks == 0 and not_found_checks > 0:
        return replace(timing, not_found_checks=not_found_checks)
    return timing


async def wait_cluster_created(
    client: Any,
    arn: str,
    timeout: float = DEFAULT_CLUSTER_TIMEOUT,
    *,
    timing: WaitTiming | None = None,
    ctx: WaitContext | None = None,
) -> ClusterInfo | None:
    """Wait for a cluster to go from CREATING to ACTIVE.

    ``timing``, when given, replaces the default timing (including ``timeout``).
    A cluster that is briefly not found right after creation is tolerated,
    also under a custom ``timing`` that leaves ``not_found_checks`` at 0.
    """
    spec = WaitSpec(
        identifier=arn,
        probe=cluster_state_probe(client),
        pending={ClusterState.CREATING},
        target={ClusterState.ACTIVE},
    ).with_timing(_timing(timing, timeout, not_found_checks=DEFAULT_NOT_FOUND_CHECKS))
    return await wait_for_state(spec, ctx=ctx, extractor=cluster_state_info)


async def wait_cluster_deleted(
    client: Any,
    arn: str,
    timeout: float = DEFAULT_CLUSTER_TIMEOUT,
    *,
    timing: WaitTiming | None = None,
    ctx: WaitContext | None = None,
) -> ClusterInfo | None:
    """Wait for a DELETING cluster to disappear. Returns None once it is gone."""
    spec = WaitSpec(
        identifier=arn,
        probe=cluster_state_probe(client),
        pending={ClusterState.DELETING},
        target=(),
    ).with_timing(_timing(timing, timeout))
    return await wait_for_state(spec, ctx=ctx, extractor=cluster_state_info)


async def wait_cluster_operation_completed(
    client: Any,
    arn: str,
    timeout: float = DEFAULT_CLUSTER_TIMEOUT,
    *,
    timing: WaitTiming | None = None,
    ctx: WaitContext | None = None,
) -> ClusterOperationInfo | None:
    """Wait for a cluster operation to reach UPDATE_COMPLETE.

    Tolerates the operation being briefly not found, as wait_cluster_created does.
    """
    spec = WaitSpec(
        identifier=arn,
        probe=cluster_operation_state_probe(client),
        pending={ClusterOperationState.PENDING, ClusterOperationState.UPDATE_IN_PROGRESS},
        target={ClusterOperationState.UPDATE_COMPLETE},
    ).with_timing(_timing(timing, timeout, not_found_checks=DEFAULT_NOT_FOUND_CHECKS))
    return await wait_for_state(spec, ctx=ctx, extractor=cluster_operation_error_info)


async def wait_configuration_deleted(
    client: Any,
    arn: str,
    timeout: float = DEFAULT_CONFIGURATION_DELETED_TIMEOUT,
    *,
    timing: WaitTiming | None = None,
    ctx: WaitContext | None = None,
) -> ConfigurationInfo | None:
    """Wait for a DELETING configuration to disappear."""
    spec = WaitSpec(
        identifier=arn,
        probe=configuration_state_probe(client),
        pending={ConfigurationState.DELETING},
        target=(),
    ).with_timing(_timing(timing, timeout))
    return await wait_for_state(spec, ctx=ctx)
