"""In-memory resource provider for dry runs.

Fabricates EC2-shaped identifiers without touching the network, so the whole
dependency graph can be exercised from the CLI with ``--dry-run``.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import UTC, datetime

from loguru import logger

from vpclaunch.types import (
    ImageCandidate,
    InstanceDescriptor,
    InstanceResult,
    KeyPairHandle,
    NetworkHandle,
    SecurityGroupHandle,
    SubnetHandle,
    ZoneList,
)

log = logger.bind(provider="local")

_IMAGES = (
    ImageCandidate("ami-local-2023a", datetime(2023, 3, 1, tzinfo=UTC)),
    ImageCandidate("ami-local-2023b", datetime(2023, 9, 1, tzinfo=UTC)),
    ImageCandidate(
        "ami-local-market", datetime(2023, 12, 1, tzinfo=UTC), product_codes=("prod-local",),
    ),
)


def _fake_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:17]}"


class LocalProvider:
    """ResourceProvider that answers every call from memory.

    Args:
        region: Region used to name the fabricated zones.
        latency: Seconds each call sleeps before answering.
    """

    def __init__(self, region: str = "us-east-2", latency: float = 0.0) -> None:
        self._region = region
        self._latency = latency

    @property
    def name(self) -> str:
        return "local"

    async def _respond(self) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)

    async def create_network(self, cidr_block: str) -> NetworkHandle:
        await self._respond()
        handle = NetworkHandle(id=_fake_id("vpc"))
        log.debug("Fabricated network {id} ({cidr})", id=handle.id, cidr=cidr_block)
        return handle

    async def create_subnet(self, network_id: str, zone: str, cidr_block: str) -> SubnetHandle:
        await self._respond()
        return SubnetHandle(id=_fake_id("subnet"), zone=zone)

    async def create_security_group(
        self, name: str, description: str, network_id: str,
    ) -> SecurityGroupHandle:
        await self._respond()
        return SecurityGroupHandle(id=_fake_id("sg"))

    async def create_key_pair(self, name: str) -> KeyPairHandle:
        await self._respond()
        return KeyPairHandle(name=name, fingerprint=uuid.uuid4().hex)

    async def describe_zones(self) -> ZoneList:
        await self._respond()
        return tuple(f"{self._region}{suffix}" for suffix in "abc")

    async def describe_images(self, name_pattern: str) -> tuple[ImageCandidate, ...]:
        await self._respond()
        return _IMAGES

    async def launch_instance(
        self,
        subnet_id: str,
        image_id: str,
        key_name: str,
        security_group_id: str,
        instance_type: str,
        environment: str,
    ) -> InstanceResult:
        await self._respond()
        instance = InstanceDescriptor(
            id=_fake_id("i"),
            instance_type=instance_type,
            state="pending",
            subnet_id=subnet_id,
            private_ip="10.0.1.10",
            image_id=image_id,
            key_name=key_name,
        )
        log.debug("Fabricated instance {id} ({env})", id=instance.id, env=environment)
        return InstanceResult(instances=(instance,))
