"""EC2 resource provider over aioboto3.

Each method opens a client from the injected factory, issues one EC2 request
and maps the response onto a vpclaunch handle. botocore failures surface as
ProviderError carrying the EC2 operation name, error code and message.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from injector import inject
from loguru import logger

from vpclaunch.config import ProvisionConfig
from vpclaunch.core.exceptions import ProviderError
from vpclaunch.internal.rethrow import rethrow
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

from .clients import EC2ClientFactory

ENVIRONMENT_TAG = "Environment"
INSTANCE_TYPE_TAG = "InstanceType"


def _provider_error(operation: str) -> Callable[[Exception], ProviderError]:
    def convert(e: Exception) -> ProviderError:
        match e:
            case ClientError():
                error = e.response.get("Error", {})
                return ProviderError(
                    operation,
                    error.get("Message", str(e)),
                    code=error.get("Code", "Unknown"),
                )
            case _:
                return ProviderError(operation, str(e), code=type(e).__name__)
    return convert


def _ec2_call(operation: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    return rethrow((ClientError, BotoCoreError), into=_provider_error(operation))


def parse_image(image: dict[str, Any]) -> ImageCandidate:
    """Map a DescribeImages entry onto an ImageCandidate."""
    image_id = image.get("ImageId", "")
    raw_date = image.get("CreationDate", "")
    try:
        created_at = datetime.fromisoformat(raw_date)
    except (TypeError, ValueError) as e:
        raise ProviderError(
            "DescribeImages",
            f"Image {image_id} has malformed CreationDate {raw_date!r}",
            code="MalformedResponse",
        ) from e
    # Naive and aware datetimes cannot be ordered against each other
    if created_at.tzinfo is None:
        raise ProviderError(
            "DescribeImages",
            f"Image {image_id} has CreationDate {raw_date!r} without a UTC offset",
            code="MalformedResponse",
        )

    product_codes = tuple(
        pc.get("ProductCodeId", "") for pc in image.get("ProductCodes") or []
    )
    return ImageCandidate(id=image_id, created_at=created_at, product_codes=product_codes)


def parse_instance(instance: dict[str, Any]) -> InstanceDescriptor:
    """Map a RunInstances entry onto an InstanceDescriptor."""
    return InstanceDescriptor(
        id=instance["InstanceId"],
        instance_type=instance.get("InstanceType", ""),
        state=instance.get("State", {}).get("Name", "pending"),
        subnet_id=instance.get("SubnetId", ""),
        private_ip=instance.get("PrivateIpAddress"),
        image_id=instance.get("ImageId", ""),
        key_name=instance.get("KeyName", ""),
    )


class AWSResourceProvider:
    """ResourceProvider backed by the EC2 API.

    Example:
        >>> from injector import Injector
        >>> injector = Injector([AWSModule(ProvisionConfig())])
        >>> provider = injector.get(AWSResourceProvider)
        >>> zones = await provider.describe_zones()
    """

    @inject
    def __init__(self, ec2: EC2ClientFactory, config: ProvisionConfig) -> None:
        self._ec2 = ec2
        self._config = config
        self._log = logger.bind(provider="aws", region=config.region)

    @property
    def name(self) -> str:
        return "aws"

    @_ec2_call("CreateVpc")
    async def create_network(self, cidr_block: str) -> NetworkHandle:
        async with self._ec2() as ec2:
            resp = await ec2.create_vpc(CidrBlock=cidr_block)
        vpc_id = resp["Vpc"]["VpcId"]
        self._log.info("Created VPC {vpc_id} ({cidr})", vpc_id=vpc_id, cidr=cidr_block)
        return NetworkHandle(id=vpc_id)

    @_ec2_call("CreateSubnet")
    async def create_subnet(self, network_id: str, zone: str, cidr_block: str) -> SubnetHandle:
        async with self._ec2() as ec2:
            resp = await ec2.create_subnet(
                VpcId=network_id,
                AvailabilityZone=zone,
                CidrBlock=cidr_block,
            )
        subnet = resp["Subnet"]
        self._log.info(
            "Created subnet {subnet_id} in {zone}",
            subnet_id=subnet["SubnetId"], zone=subnet.get("AvailabilityZone", zone),
        )
        return SubnetHandle(id=subnet["SubnetId"], zone=subnet.get("AvailabilityZone", zone))

    @_ec2_call("CreateSecurityGroup")
    async def create_security_group(
        self, name: str, description: str, network_id: str,
    ) -> SecurityGroupHandle:
        async with self._ec2() as ec2:
            resp = await ec2.create_security_group(
                GroupName=name,
                Description=description,
                VpcId=network_id,
            )
        self._log.info("Created security group {sg_id} ({name})", sg_id=resp["GroupId"], name=name)
        return SecurityGroupHandle(id=resp["GroupId"])

    @_ec2_call("CreateKeyPair")
    async def create_key_pair(self, name: str) -> KeyPairHandle:
        async with self._ec2() as ec2:
            resp = await ec2.create_key_pair(KeyName=name)
        self._log.info("Created key pair {name}", name=resp["KeyName"])
        return KeyPairHandle(
            name=resp["KeyName"],
            fingerprint=resp.get("KeyFingerprint", ""),
            material=resp.get("KeyMaterial", ""),
        )

    @_ec2_call("DescribeAvailabilityZones")
    async def describe_zones(self) -> ZoneList:
        async with self._ec2() as ec2:
            resp = await ec2.describe_availability_zones()
        zones = tuple(z["ZoneName"] for z in resp.get("AvailabilityZones", []))
        self._log.debug("Discovered zones: {zones}", zones=", ".join(zones))
        return zones

    @_ec2_call("DescribeImages")
    async def describe_images(self, name_pattern: str) -> tuple[ImageCandidate, ...]:
        async with self._ec2() as ec2:
            resp = await ec2.describe_images(
                Filters=[{"Name": "name", "Values": [name_pattern]}],
            )
        images = tuple(parse_image(i) for i in resp.get("Images", []))
        self._log.debug(
            "Discovered {n} image(s) matching {pattern}", n=len(images), pattern=name_pattern,
        )
        return images

    @_ec2_call("RunInstances")
    async def launch_instance(
        self,
        subnet_id: str,
        image_id: str,
        key_name: str,
        security_group_id: str,
        instance_type: str,
        environment: str,
    ) -> InstanceResult:
        async with self._ec2() as ec2:
            resp = await ec2.run_instances(
                ImageId=image_id,
                InstanceType=instance_type,
                KeyName=key_name,
                SecurityGroupIds=[security_group_id],
                SubnetId=subnet_id,
                MinCount=1,
                MaxCount=1,
                TagSpecifications=[
                    {
                        "ResourceType": "instance",
                        "Tags": [
                            {"Key": ENVIRONMENT_TAG, "Value": environment},
                            {"Key": INSTANCE_TYPE_TAG, "Value": instance_type},
                        ],
                    }
                ],
            )
        instances = tuple(parse_instance(i) for i in resp.get("Instances", []))
        self._log.info(
            "Launched {ids}", ids=", ".join(i.id for i in instances) or "no instances",
        )
        return InstanceResult(instances=instances)


__all__ = ["AWSResourceProvider", "parse_image", "parse_instance"]
