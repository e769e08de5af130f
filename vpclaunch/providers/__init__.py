"""Resource providers.

Public API:
    ResourceProvider    - Protocol every provider implements
    LocalProvider       - In-memory provider for dry runs

The EC2 provider lives in vpclaunch.providers.aws and is imported on demand.
"""

from vpclaunch.providers.base import ResourceProvider
from vpclaunch.providers.local import LocalProvider

__all__ = [
    "LocalProvider",
    "ResourceProvider",
]
