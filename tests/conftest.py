from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from vpclaunch.config import ProvisionConfig
from vpclaunch.core.exceptions import ProviderError
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

PROVIDER_CALLS = (
    "describe_zones",
    "create_network",
    "describe_images",
    "create_key_pair",
    "create_security_group",
    "create_subnet",
    "launch_instance",
)

DEFAULT_IMAGES = (
    ImageCandidate("ami-old", datetime(2023, 1, 1, tzinfo=UTC)),
    ImageCandidate("ami-new", datetime(2023, 6, 1, tzinfo=UTC)),
    ImageCandidate("ami-paid", datetime(2023, 12, 1, tzinfo=UTC), product_codes=("abc",)),
)


@dataclass
class RecordingProvider:
    """Instrumented provider that records when each call starts and ends.

    Args:
        fail: Call names that raise ProviderError once reached.
        delays: Per-call sleep before answering, in seconds.
        block: Call names that never answer until cancelled.
        zones: Zones returned by describe_zones.
        images: Candidates returned by describe_images.
    """

    fail: frozenset[str] = frozenset()
    delays: Mapping[str, float] = field(default_factory=dict)
    block: frozenset[str] = frozenset()
    zones: ZoneList = ("zone-a", "zone-b", "zone-c")
    images: tuple[ImageCandidate, ...] = DEFAULT_IMAGES
    events: list[tuple[str, str]] = field(default_factory=list)
    calls: dict[str, tuple[object, ...]] = field(default_factory=dict)
    in_flight: int = 0
    max_in_flight: int = 0

    @property
    def name(self) -> str:
        return "recording"

    def started(self, call: str) -> bool:
        return ("start", call) in self.events

    def finished(self, call: str) -> bool:
        return ("end", call) in self.events

    def index(self, kind: str, call: str) -> int:
        return self.events.index((kind, call))

    async def _call(self, call: str, *args: object) -> None:
        self.events.append(("start", call))
        self.calls[call] = args
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if call in self.block:
                await asyncio.Event().wait()
            await asyncio.sleep(self.delays.get(call, 0))
            if call in self.fail:
                raise ProviderError(call, "injected failure", code="Injected")
        finally:
            self.in_flight -= 1
        self.events.append(("end", call))

    async def describe_zones(self) -> ZoneList:
        await self._call("describe_zones")
        return self.zones

    async def create_network(self, cidr_block: str) -> NetworkHandle:
        await self._call("create_network", cidr_block)
        return NetworkHandle(id="vpc-123")

    async def describe_images(self, name_pattern: str) -> tuple[ImageCandidate, ...]:
        await self._call("describe_images", name_pattern)
        return self.images

    async def create_key_pair(self, name: str) -> KeyPairHandle:
        await self._call("create_key_pair", name)
        return KeyPairHandle(name=name, fingerprint="fp")

    async def create_security_group(
        self, name: str, description: str, network_id: str,
    ) -> SecurityGroupHandle:
        await self._call("create_security_group", name, description, network_id)
        return SecurityGroupHandle(id="sg-123")

    async def create_subnet(self, network_id: str, zone: str, cidr_block: str) -> SubnetHandle:
        await self._call("create_subnet", network_id, zone, cidr_block)
        return SubnetHandle(id="subnet-123", zone=zone)

    async def launch_instance(
        self,
        subnet_id: str,
        image_id: str,
        key_name: str,
        security_group_id: str,
        instance_type: str,
        environment: str,
    ) -> InstanceResult:
        await self._call(
            "launch_instance",
            subnet_id, image_id, key_name, security_group_id, instance_type, environment,
        )
        return InstanceResult(instances=(
            InstanceDescriptor(
                id="i-123",
                instance_type=instance_type,
                subnet_id=subnet_id,
                image_id=image_id,
                key_name=key_name,
            ),
        ))


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def config() -> ProvisionConfig:
    return ProvisionConfig()
