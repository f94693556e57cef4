"""Status probes for Amazon MSK resources.

Each factory closes over an aiobotocore ``kafka`` client and returns a
probe usable in a WaitSpec. Throttling is retried inside the probe;
a missing resource surfaces as ResourceNotFoundError.
"""

from __future__ import annotations

from typing import Any

from botocore.exceptions import ClientError

from settle.core.exceptions import ResourceNotFoundError
from settle.providers.kafka.states import ClusterInfo, ClusterOperationInfo, ConfigurationInfo
from settle.retry import on_error_code, retry
from settle.types import Probe, ProbeResult

__all__ = [
    "cluster_state_probe",
    "cluster_operation_state_probe",
    "configuration_state_probe",
]

NOT_FOUND_CODE = "NotFoundException"

THROTTLING_CODES = (
    "ThrottlingException",
    "TooManyRequestsException",
    "ServiceUnavailableException",
    "InternalServerErrorException",
)


def _is_not_found(e: ClientError) -> bool:
    return e.response.get("Error", {}).get("Code") == NOT_FOUND_CODE


def cluster_state_probe(client: Any) -> Probe[ClusterInfo]:
    """Probe ``ClusterInfo.State`` through DescribeClusterV2."""

    @retry(on=on_error_code(*THROTTLING_CODES))
    async def probe(arn: str) -> ProbeResult[ClusterInfo]:
        try:
            response = await client.describe_cluster_v2(ClusterArn=arn)
        except ClientError as e:
            if _is_not_found(e):
                raise ResourceNotFoundError(f"MSK cluster {arn} not found") from e
            raise

        cluster = response.get("ClusterInfo")
        if cluster is None:
            raise ResourceNotFoundError(f"MSK cluster {arn} not found")
        return ProbeResult(state=cluster.get("State", ""), payload=cluster)

    return probe


def cluster_operation_state_probe(client: Any) -> Probe[ClusterOperationInfo]:
    """Probe ``ClusterOperationInfo.OperationState`` through DescribeClusterOperation."""

    @retry(on=on_error_code(*THROTTLING_CODES))
    async def probe(arn: str) -> ProbeResult[ClusterOperationInfo]:
        try:
            response = await client.describe_cluster_operation(ClusterOperationArn=arn)
        except ClientError as e:
            if _is_not_found(e):
                raise ResourceNotFoundError(f"MSK cluster operation {arn} not found") from e
            raise

        operation = response.get("ClusterOperationInfo")
        if operation is None:
            raise ResourceNotFoundError(f"MSK cluster operation {arn} not found")
        return ProbeResult(state=operation.get("OperationState", ""), payload=operation)

    return probe


def configuration_state_probe(client: Any) -> Probe[ConfigurationInfo]:
    """Probe the ``State`` of an MSK configuration through DescribeConfiguration."""

    @retry(on=on_error_code(*THROTTLING_CODES))
    async def probe(arn: str) -> ProbeResult[ConfigurationInfo]:
        try:
            response = await client.describe_configuration(Arn=arn)
        except ClientError as e:
            if _is_not_found(e):
                raise ResourceNotFoundError(f"MSK configuration {arn} not found") from e
            raise

        configuration = {k: v for k, v in response.items() if k != "ResponseMetadata"}
        return ProbeResult(state=configuration.get("State", ""), payload=configuration)

    return probe
