"""Synchronous entry point for a provisioning run.

    import vpclaunch

    result = vpclaunch.provision(vpclaunch.ProvisionConfig(region="us-west-2"))
    print(result.instances, result.elapsed)

Internally, this facade:
1. Builds the EC2 provider through the injector unless one is passed in
2. Enables logging for the duration of the run when a LogConfig is given
3. Drives the async orchestrator on a fresh event loop
"""

from __future__ import annotations

import asyncio

from vpclaunch.config import ProvisionConfig
from vpclaunch.logging import LogConfig, logging_enabled
from vpclaunch.orchestrator import Orchestrator
from vpclaunch.providers.base import ResourceProvider
from vpclaunch.types import ProvisionResult


def _default_provider(config: ProvisionConfig) -> ResourceProvider:
    # Imported lazily: aioboto3 is only needed for real runs
    from vpclaunch.providers.aws import create_provider

    return create_provider(config)


async def provision_async(
    config: ProvisionConfig | None = None,
    *,
    provider: ResourceProvider | None = None,
) -> ProvisionResult:
    """Run the provisioning graph on the current event loop."""
    config = config or ProvisionConfig()
    provider = provider or _default_provider(config)
    return await Orchestrator(provider, config).run()


def provision(
    config: ProvisionConfig | None = None,
    *,
    provider: ResourceProvider | None = None,
    logging: LogConfig | None = None,
) -> ProvisionResult:
    """Provision a network, subnet, security group, key pair and instance.

    Args:
        config: Run configuration. Defaults to ``ProvisionConfig()``.
        provider: Resource provider. Defaults to the EC2 provider for
            ``config.region``.
        logging: Enables loguru output for the run when given.

    Returns:
        The launched instances and the run's elapsed time.

    Raises:
        ProviderError: A provider call failed. Resources created earlier in
            the run are not removed.
        SelectionError: No usable image or zone was found.
    """
    with logging_enabled(logging):
        return asyncio.run(provision_async(config, provider=provider))
