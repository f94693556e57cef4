"""Kafka client factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aioboto3


@asynccontextmanager
async def kafka_client(
    region: str | None = None,
    profile: str | None = None,
) -> AsyncIterator[Any]:
    """Open an aiobotocore ``kafka`` client for the probes in this package.

    Example:
        async with kafka_client("us-east-1") as client:
            await wait_cluster_created(client, arn)
    """
    session = aioboto3.Session(profile_name=profile)
    async with session.client("kafka", region_name=region) as client:
        yield client
