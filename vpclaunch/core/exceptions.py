"""Custom exception hierarchy for vpclaunch.

All vpclaunch-specific exceptions inherit from VpcLaunchError, enabling
callers to catch every provisioning failure with a single except clause.
"""

from __future__ import annotations


class VpcLaunchError(Exception):
    """Base exception for all vpclaunch errors."""


class ProviderError(VpcLaunchError):
    """Raised when a resource provider call fails.

    Carries the upstream failure detail: the operation that was issued,
    the provider's error code and its message.
    """

    def __init__(self, operation: str, message: str, code: str = "Unknown") -> None:
        self.operation = operation
        self.code = code
        self.message = message
        super().__init__(f"{operation} failed ({code}): {message}")


class SelectionError(VpcLaunchError):
    """Raised when a selector finds no valid candidate."""


class ConfigurationError(VpcLaunchError):
    """Raised for invalid configuration or missing required settings."""
