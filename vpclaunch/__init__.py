"""vpclaunch - provision a minimal EC2 environment in one concurrent run.

Example:

    import vpclaunch

    result = vpclaunch.provision(
        vpclaunch.ProvisionConfig(region="us-west-2", environment="Staging"),
        logging=vpclaunch.LogConfig(level="DEBUG"),
    )
    for instance in result.instances:
        print(instance.id, instance.state)
    print(f"time took: {result.elapsed:.2f} seconds")
"""

from vpclaunch.config import ProvisionConfig, resolve_config
from vpclaunch.core.exceptions import (
    ConfigurationError,
    ProviderError,
    SelectionError,
    VpcLaunchError,
)
from vpclaunch.facade import provision, provision_async
from vpclaunch.logging import LogConfig
from vpclaunch.orchestrator import Orchestrator
from vpclaunch.providers import LocalProvider, ResourceProvider
from vpclaunch.selection import select_ami, select_zone
from vpclaunch.types import (
    ImageCandidate,
    InstanceDescriptor,
    InstanceResult,
    KeyPairHandle,
    NetworkHandle,
    ProvisionResult,
    SecurityGroupHandle,
    SubnetHandle,
    ZoneList,
)

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "provision",
    "provision_async",
    "Orchestrator",
    # Configuration
    "ProvisionConfig",
    "resolve_config",
    "LogConfig",
    # Providers
    "ResourceProvider",
    "LocalProvider",
    # Selection
    "select_ami",
    "select_zone",
    # Types
    "ImageCandidate",
    "InstanceDescriptor",
    "InstanceResult",
    "KeyPairHandle",
    "NetworkHandle",
    "ProvisionResult",
    "SecurityGroupHandle",
    "SubnetHandle",
    "ZoneList",
    # Errors
    "VpcLaunchError",
    "ProviderError",
    "SelectionError",
    "ConfigurationError",
]
