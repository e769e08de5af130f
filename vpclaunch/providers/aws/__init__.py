"""EC2 binding of the resource provider protocol."""

from __future__ import annotations

from injector import Injector

from vpclaunch.config import ProvisionConfig

from .clients import AWSModule, Client, EC2ClientFactory
from .provider import AWSResourceProvider


def create_provider(config: ProvisionConfig) -> AWSResourceProvider:
    """Wire an AWSResourceProvider for ``config`` through the injector."""
    injector = Injector([AWSModule(config)])
    return injector.get(AWSResourceProvider)


__all__ = [
    "AWSModule",
    "AWSResourceProvider",
    "Client",
    "EC2ClientFactory",
    "create_provider",
]
