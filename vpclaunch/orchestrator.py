"""Dependency-ordered provisioning of a single-instance environment.

The run is a fixed graph of seven asyncio tasks, all spawned at once inside a
TaskGroup. A task whose provider call needs another task's output awaits that
task first; a task with no dependencies starts its call immediately.

    zone-discovery ──> (zone selection) ──> subnet-creation ──────┐
    network-creation ──┬──────────────────────^                   │
                       └──> security-group-creation ──────────────┤
    image-discovery ──> (image selection) ────────────────────────┤
    key-pair-creation ────────────────────────────────────────────┤
                                                                  v
                                                          instance-launch

The first failure cancels every task still running and is re-raised to the
caller unwrapped. Nothing is rolled back: resources created before the
failure stay in the account and are listed in the log and on the error.
"""

from __future__ import annotations

import asyncio
import random
import time
from collections.abc import Callable, Iterable
from typing import Any

from loguru import logger

from vpclaunch.config import ProvisionConfig
from vpclaunch.providers.base import ResourceProvider
from vpclaunch.selection import select_ami, select_zone
from vpclaunch.types import (
    InstanceResult,
    KeyPairHandle,
    NetworkHandle,
    ProvisionResult,
    SecurityGroupHandle,
    SubnetHandle,
    ZoneList,
)

log = logger.bind(component="orchestrator")

type Clock = Callable[[], float]


def _first_error(group: BaseExceptionGroup[Any]) -> BaseException:
    """Return the earliest leaf exception recorded in a (nested) group."""
    first = group.exceptions[0]
    match first:
        case BaseExceptionGroup():
            return _first_error(first)
        case _:
            return first


def _describe(value: object) -> str:
    match value:
        case NetworkHandle(id=id_) | SecurityGroupHandle(id=id_) | SubnetHandle(id=id_):
            return id_
        case KeyPairHandle(name=name):
            return f"key pair {name}"
        case InstanceResult(instances=instances):
            return ", ".join(i.id for i in instances)
        case _:
            return str(value)


class Orchestrator:
    """Runs the provisioning graph against a resource provider.

    Args:
        provider: Provider that issues the create/describe calls.
        config: Immutable run configuration.
        rng: Random source for zone selection. Defaults to a fresh Random.
        clock: Monotonic clock used for the elapsed time.
    """

    def __init__(
        self,
        provider: ResourceProvider,
        config: ProvisionConfig,
        *,
        rng: random.Random | None = None,
        clock: Clock = time.perf_counter,
    ) -> None:
        self._provider = provider
        self._config = config
        self._rng = rng or random.Random()
        self._clock = clock

    async def run(self) -> ProvisionResult:
        """Provision the environment and return the launched instances.

        Raises:
            ProviderError: A provider call failed.
            SelectionError: No usable image or zone was found.
        """
        started = self._clock()
        log.info(
            "Provisioning in {region} via {provider}",
            region=self._config.region, provider=self._provider.name,
        )

        tasks: tuple[asyncio.Task[Any], ...] = ()
        try:
            async with asyncio.TaskGroup() as tg:
                zones = tg.create_task(self._discover_zones(), name="zone-discovery")
                network = tg.create_task(self._create_network(), name="network-creation")
                image = tg.create_task(self._discover_image(), name="image-discovery")
                key_pair = tg.create_task(self._create_key_pair(), name="key-pair-creation")
                security_group = tg.create_task(
                    self._create_security_group(network), name="security-group-creation",
                )
                subnet = tg.create_task(
                    self._create_subnet(network, zones), name="subnet-creation",
                )
                launch = tg.create_task(
                    self._launch_instance(subnet, image, key_pair, security_group),
                    name="instance-launch",
                )
                tasks = (zones, network, image, key_pair, security_group, subnet, launch)
        except BaseExceptionGroup as group:
            error = _first_error(group)
            self._report_abort(error, tasks)
            raise error from None

        elapsed = self._clock() - started
        instances = launch.result().instances
        log.info(
            "Launched {n} instance(s) in {elapsed:.2f}s", n=len(instances), elapsed=elapsed,
        )
        return ProvisionResult(
            instances=instances,
            elapsed=max(elapsed, 0.0),
            network=network.result(),
            subnet=subnet.result(),
            security_group=security_group.result(),
            key_pair=key_pair.result(),
            image_id=image.result(),
        )

    # -------------------------------------------------------------------------
    # Independent tasks
    # -------------------------------------------------------------------------

    async def _discover_zones(self) -> ZoneList:
        zones = await self._provider.describe_zones()
        log.bind(task="zone-discovery").debug("Found {n} zone(s)", n=len(zones))
        return zones

    async def _create_network(self) -> NetworkHandle:
        return await self._provider.create_network(self._config.network_cidr)

    async def _discover_image(self) -> str:
        candidates = await self._provider.describe_images(self._config.ami_name_pattern)
        image_id = select_ami(candidates)
        log.bind(task="image-discovery").debug(
            "Selected {image_id} from {n} candidate(s)", image_id=image_id, n=len(candidates),
        )
        return image_id

    async def _create_key_pair(self) -> KeyPairHandle:
        return await self._provider.create_key_pair(self._config.key_pair_name)

    # -------------------------------------------------------------------------
    # Dependent tasks
    # -------------------------------------------------------------------------

    async def _create_security_group(
        self, network: asyncio.Task[NetworkHandle],
    ) -> SecurityGroupHandle:
        vpc = await network
        return await self._provider.create_security_group(
            self._config.security_group_name,
            self._config.security_group_description,
            vpc.id,
        )

    async def _create_subnet(
        self,
        network: asyncio.Task[NetworkHandle],
        zones: asyncio.Task[ZoneList],
    ) -> SubnetHandle:
        zone = select_zone(await zones, self._config.zone_policy, self._rng)
        log.bind(task="subnet-creation").debug("Selected zone {zone}", zone=zone)
        vpc = await network
        return await self._provider.create_subnet(vpc.id, zone, self._config.subnet_cidr)

    async def _launch_instance(
        self,
        subnet: asyncio.Task[SubnetHandle],
        image: asyncio.Task[str],
        key_pair: asyncio.Task[KeyPairHandle],
        security_group: asyncio.Task[SecurityGroupHandle],
    ) -> InstanceResult:
        subnet_handle = await subnet
        image_id = await image
        key = await key_pair
        sg = await security_group
        return await self._provider.launch_instance(
            subnet_handle.id,
            image_id,
            key.name,
            sg.id,
            self._config.instance_type,
            self._config.environment,
        )

    # -------------------------------------------------------------------------
    # Failure reporting
    # -------------------------------------------------------------------------

    def _report_abort(self, error: BaseException, tasks: Iterable[asyncio.Task[Any]]) -> None:
        left_behind: list[str] = []
        interrupted: list[str] = []
        for task in tasks:
            if not task.done() or task.cancelled():
                interrupted.append(task.get_name())
            elif task.exception() is None and task.get_name().endswith(("-creation", "-launch")):
                left_behind.append(_describe(task.result()))

        log.error("Provisioning aborted: {error}", error=error)
        if left_behind:
            log.warning(
                "Resources created before the failure were not removed: {resources}",
                resources=", ".join(left_behind),
            )
            error.add_note(f"Resources left behind: {', '.join(left_behind)}")
        if interrupted:
            log.warning(
                "Cancelled in-flight tasks (their resources may still exist): {names}",
                names=", ".join(interrupted),
            )
