"""Resource handles produced by a provisioning run.

Every value here is created once per run, never mutated, and handed to the
task that depends on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

type ZoneList = tuple[str, ...]
"""Availability zone names, in the order the provider reported them."""


@dataclass(frozen=True, slots=True)
class NetworkHandle:
    id: str


@dataclass(frozen=True, slots=True)
class SecurityGroupHandle:
    id: str


@dataclass(frozen=True, slots=True)
class SubnetHandle:
    id: str
    zone: str = ""


@dataclass(frozen=True, slots=True)
class KeyPairHandle:
    """A created SSH key pair.

    ``material`` holds the private key when the provider returns it; it is
    excluded from ``repr`` so it never ends up in logs.
    """

    name: str
    fingerprint: str = ""
    material: str = ""

    def __repr__(self) -> str:
        return f"KeyPairHandle(name={self.name!r}, fingerprint={self.fingerprint!r})"


@dataclass(frozen=True, slots=True)
class ImageCandidate:
    """A machine image returned by image discovery."""

    id: str
    created_at: datetime
    product_codes: tuple[str, ...] = ()

    @property
    def has_marketplace_code(self) -> bool:
        return len(self.product_codes) > 0


@dataclass(frozen=True, slots=True)
class InstanceDescriptor:
    id: str
    instance_type: str
    state: str = "pending"
    subnet_id: str = ""
    private_ip: str | None = None
    image_id: str = ""
    key_name: str = ""


@dataclass(frozen=True, slots=True)
class InstanceResult:
    instances: tuple[InstanceDescriptor, ...]


@dataclass(frozen=True, slots=True)
class ProvisionResult:
    """Outcome of a successful run.

    Args:
        instances: Launched instance descriptors.
        elapsed: Wall-clock seconds from run start to instance launch.
        network: Network the instance lives in.
        subnet: Subnet the instance was launched into.
        security_group: Security group attached to the instance.
        key_pair: Key pair the instance accepts.
        image_id: Image the instance was launched from.
    """

    instances: tuple[InstanceDescriptor, ...]
    elapsed: float
    network: NetworkHandle
    subnet: SubnetHandle
    security_group: SecurityGroupHandle
    key_pair: KeyPairHandle
    image_id: str
