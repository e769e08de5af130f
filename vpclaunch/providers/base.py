"""Resource provider protocol.

A resource provider issues the create/describe calls the orchestrator needs.
Each method is a single request/response unit of work that may suspend on
network I/O. Implementations return a typed result or raise ProviderError
with the upstream failure detail; they never retry.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from vpclaunch.types import (
    ImageCandidate,
    InstanceResult,
    KeyPairHandle,
    NetworkHandle,
    SecurityGroupHandle,
    SubnetHandle,
    ZoneList,
)


@runtime_checkable
class ResourceProvider(Protocol):
    """Create and describe the resources of a single-instance environment."""

    @property
    def name(self) -> str: ...

    async def create_network(self, cidr_block: str) -> NetworkHandle: ...

    async def create_subnet(
        self, network_id: str, zone: str, cidr_block: str,
    ) -> SubnetHandle: ...

    async def create_security_group(
        self, name: str, description: str, network_id: str,
    ) -> SecurityGroupHandle: ...

    async def create_key_pair(self, name: str) -> KeyPairHandle: ...

    async def describe_zones(self) -> ZoneList: ...

    async def describe_images(self, name_pattern: str) -> tuple[ImageCandidate, ...]: ...

    async def launch_instance(
        self,
        subnet_id: str,
        image_id: str,
        key_name: str,
        security_group_id: str,
        instance_type: str,
        environment: str,
    ) -> InstanceResult:
        """Launch exactly one instance tagged with its type and environment."""
        ...
