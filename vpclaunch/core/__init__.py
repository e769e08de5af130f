from vpclaunch.core.exceptions import (
    ConfigurationError,
    ProviderError,
    SelectionError,
    VpcLaunchError,
)

__all__ = [
    "ConfigurationError",
    "ProviderError",
    "SelectionError",
    "VpcLaunchError",
]
