"""Amazon MSK (Kafka) waiters.

Example:
    from settle.providers.kafka import kafka_client, wait_cluster_created

    async with kafka_client("us-east-1") as client:
        cluster = await wait_cluster_created(client, arn)
"""

from settle.providers.kafka.clients import kafka_client
from settle.providers.kafka.states import (
    ClusterOperationState,
    ClusterState,
    ConfigurationState,
    cluster_operation_error_info,
    cluster_state_info,
)
from settle.providers.kafka.status import (
    cluster_operation_state_probe,
    cluster_state_probe,
    configuration_state_probe,
)
from settle.providers.kafka.wait import (
    wait_cluster_created,
    wait_cluster_deleted,
    wait_cluster_operation_completed,
    wait_configuration_deleted,
)

__all__ = [
    "ClusterOperationState",
    "ClusterState",
    "ConfigurationState",
    "cluster_operation_error_info",
    "cluster_operation_state_probe",
    "cluster_state_info",
    "cluster_state_probe",
    "configuration_state_probe",
    "kafka_client",
    "wait_cluster_created",
    "wait_cluster_deleted",
    "wait_cluster_operation_completed",
    "wait_configuration_deleted",
]
