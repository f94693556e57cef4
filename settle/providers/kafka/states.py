"""Amazon MSK lifecycle states and failure diagnostics."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

__all__ = [
    "ClusterState",
    "ClusterOperationState",
    "ConfigurationState",
    "cluster_state_info",
    "cluster_operation_error_info",
]

type ClusterInfo = dict[str, Any]
type ClusterOperationInfo = dict[str, Any]
type ConfigurationInfo = dict[str, Any]


class ClusterState(StrEnum):
    """MSK cluster states (``ClusterInfo.State``)."""

    ACTIVE = "ACTIVE"
    CREATING = "CREATING"
    DELETING = "DELETING"
    FAILED = "FAILED"
    HEALING = "HEALING"
    MAINTENANCE = "MAINTENANCE"
    REBOOTING_BROKER = "REBOOTING_BROKER"
    UPDATING = "UPDATING"


class ClusterOperationState(StrEnum):
    """MSK cluster operation states (``ClusterOperationInfo.OperationState``)."""

    PENDING = "PENDING"
    UPDATE_IN_PROGRESS = "UPDATE_IN_PROGRESS"
    UPDATE_COMPLETE = "UPDATE_COMPLETE"
    UPDATE_FAILED = "UPDATE_FAILED"


class ConfigurationState(StrEnum):
    """MSK configuration states (``DescribeConfiguration.State``)."""

    ACTIVE = "ACTIVE"
    DELETING = "DELETING"
    DELETE_FAILED = "DELETE_FAILED"


# =============================================================================
# Extractors
# =============================================================================


def cluster_state_info(cluster: ClusterInfo | None) -> tuple[str, str] | None:
    """Diagnostic of a FAILED cluster, taken from its ``StateInfo``."""
    if not cluster or cluster.get("State") != ClusterState.FAILED:
        return None
    info = cluster.get("StateInfo")
    if not info:
        return None
    return info.get("Code", ""), info.get("Message", "")


def cluster_operation_error_info(
    operation: ClusterOperationInfo | None,
) -> tuple[str, str] | None:
    """Diagnostic of a failed cluster operation, taken from its ``ErrorInfo``."""
    if not operation or operation.get("OperationState") != ClusterOperationState.UPDATE_FAILED:
        return None
    info = operation.get("ErrorInfo")
    if not info:
        return None
    return info.get("ErrorCode", ""), info.get("ErrorString", "")
