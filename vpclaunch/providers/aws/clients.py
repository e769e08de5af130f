"""AWS client factories with dependency injection.

Provides typed client factories that can be injected into components.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any

import aioboto3
from injector import Binder, Module, provider, singleton

from vpclaunch.config import ProvisionConfig

if TYPE_CHECKING:
    from types_aiobotocore_ec2 import EC2Client


# =============================================================================
# Client Type
# =============================================================================

type Client[T] = Callable[[], AbstractAsyncContextManager[T]]
"""Factory that returns an async context manager for a client."""


class EC2ClientFactory:
    """Wrapper for EC2 client factory (DI needs a unique type)."""

    def __init__(self, factory: Callable[[], AbstractAsyncContextManager[Any]]) -> None:
        self._factory = factory

    def __call__(self) -> AbstractAsyncContextManager[EC2Client]:
        return self._factory()


# =============================================================================
# AWS Module
# =============================================================================


class AWSModule(Module):
    """DI module that provides the run configuration and an EC2 client factory.

    Usage:
        >>> from injector import Injector
        >>> from vpclaunch.providers.aws import AWSModule, AWSResourceProvider
        >>>
        >>> injector = Injector([AWSModule(ProvisionConfig(region="us-east-1"))])
        >>> provider = injector.get(AWSResourceProvider)
    """

    def __init__(self, config: ProvisionConfig) -> None:
        self._config = config

    def configure(self, binder: Binder) -> None:
        binder.bind(ProvisionConfig, to=self._config)

    @singleton
    @provider
    def provide_session(self) -> aioboto3.Session:
        """Provide singleton aioboto3 session."""
        return aioboto3.Session()

    @singleton
    @provider
    def provide_ec2(self, session: aioboto3.Session, config: ProvisionConfig) -> EC2ClientFactory:
        """Provide EC2 client factory bound to the configured region."""
        @asynccontextmanager
        async def factory() -> AsyncIterator[Any]:
            async with session.client("ec2", region_name=config.region) as client:
                yield client
        return EC2ClientFactory(factory)


__all__ = [
    "AWSModule",
    "Client",
    "EC2ClientFactory",
]
