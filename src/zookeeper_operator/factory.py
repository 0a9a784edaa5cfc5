"""Component factory and per-process context management."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager
from dataclasses import dataclass
from typing import Self

import structlog
from kubernetes_asyncio import client
from kubernetes_asyncio.client import ApiClient
from safir.slack.webhook import SlackWebhookClient
from structlog.stdlib import BoundLogger

from .config import Config
from .services.builder.configmap import ConfigMapBuilder
from .services.cluster import ClusterReconciler
from .services.composer import ConfigComposer
from .services.discovery import DiscoveryResolver
from .services.ensemble import EnsembleConfigRenderer
from .services.security import SecurityResolver
from .services.znode import ZNodeLifecycleManager
from .storage.kubernetes.creator import ConfigMapStorage
from .storage.kubernetes.custom import (
    AuthenticationClassStorage,
    ZookeeperClusterStorage,
    ZookeeperZnodeStorage,
)
from .storage.kubernetes.endpoints import EndpointSliceStorage
from .storage.kubernetes.service import ServiceStorage
from .storage.zookeeper import ZooKeeperStorage

__all__ = ["Factory", "ProcessContext"]


@dataclass(frozen=True, slots=True)
class ProcessContext:
    """Per-process global operator state.

    This object holds the per-process singletons. It is created by the
    operator startup handler, stored in the operator memo, and used by the
    `Factory` class as a source of dependencies to inject into created
    service and storage objects.
    """

    config: Config
    """Operator configuration."""

    kubernetes_client: ApiClient
    """Shared Kubernetes client."""

    slack_client: SlackWebhookClient | None
    """Client for Slack alerts, if a webhook is configured."""

    @classmethod
    async def from_config(cls, config: Config) -> Self:
        """Create a new process context from the operator configuration.

        Parameters
        ----------
        config
            Operator configuration.

        Returns
        -------
        ProcessContext
            Shared context for an operator process.
        """
        logger = structlog.get_logger(__name__)
        slack_client = None
        if config.slack_webhook:
            slack_client = SlackWebhookClient(
                config.slack_webhook.get_secret_value(), config.name, logger
            )
        return cls(
            config=config,
            kubernetes_client=client.ApiClient(),
            slack_client=slack_client,
        )

    async def aclose(self) -> None:
        """Free allocated resources."""
        await self.kubernetes_client.close()


class Factory:
    """Build operator components.

    Uses the contents of a `ProcessContext` to construct the components of the
    operator on demand.

    Parameters
    ----------
    context
        Shared process context.
    logger
        Logger to use for messages.
    """

    @classmethod
    @asynccontextmanager
    async def standalone(cls, config: Config) -> AsyncIterator[Self]:
        """Async context manager for operator components.

        Intended for the test suite.

        Parameters
        ----------
        config
            Operator configuration.

        Yields
        ------
        Factory
            Newly-created factory. Must be used as a context manager.
        """
        logger = structlog.get_logger(__name__)
        context = await ProcessContext.from_config(config)
        factory = cls(context, logger)
        async with aclosing(factory):
            yield factory

    def __init__(self, context: ProcessContext, logger: BoundLogger) -> None:
        self._context = context
        self._logger = logger

    async def aclose(self) -> None:
        """Shut down the factory.

        After this method is called, the factory object is no longer valid and
        must not be used.
        """
        await self._context.aclose()

    def create_cluster_reconciler(self) -> ClusterReconciler:
        """Create the reconciler for ``ZookeeperCluster`` objects.

        Returns
        -------
        ClusterReconciler
            Newly-created reconciler.
        """
        config = self._context.config
        api_client = self._context.kubernetes_client
        return ClusterReconciler(
            composer=ConfigComposer(),
            security_resolver=self.create_security_resolver(),
            renderer=EnsembleConfigRenderer(config.cluster_domain),
            builder=ConfigMapBuilder(),
            config_map_storage=ConfigMapStorage(api_client, self._logger),
            cluster_storage=ZookeeperClusterStorage(api_client, self._logger),
            discovery=self.create_discovery_resolver(),
            kubernetes_timeout=config.kubernetes_timeout,
            logger=self._logger,
        )

    def create_discovery_resolver(self) -> DiscoveryResolver:
        """Create the resolver and publisher of connection strings.

        Returns
        -------
        DiscoveryResolver
            Newly-created resolver.
        """
        api_client = self._context.kubernetes_client
        return DiscoveryResolver(
            config_map_storage=ConfigMapStorage(api_client, self._logger),
            service_storage=ServiceStorage(api_client, self._logger),
            endpoint_slice_storage=EndpointSliceStorage(
                api_client, self._logger
            ),
            builder=ConfigMapBuilder(),
            cluster_domain=self._context.config.cluster_domain,
            logger=self._logger,
        )

    def create_security_resolver(self) -> SecurityResolver:
        """Create the resolver for cluster security.

        Returns
        -------
        SecurityResolver
            Newly-created resolver.
        """
        config = self._context.config
        storage = AuthenticationClassStorage(
            self._context.kubernetes_client, self._logger
        )
        password = config.zookeeper.store_password.get_secret_value()
        return SecurityResolver(storage, password, self._logger)

    def create_znode_manager(self) -> ZNodeLifecycleManager:
        """Create the lifecycle manager for ``ZookeeperZnode`` objects.

        Returns
        -------
        ZNodeLifecycleManager
            Newly-created manager.
        """
        config = self._context.config
        api_client = self._context.kubernetes_client
        return ZNodeLifecycleManager(
            cluster_storage=ZookeeperClusterStorage(api_client, self._logger),
            znode_storage=ZookeeperZnodeStorage(api_client, self._logger),
            security_resolver=self.create_security_resolver(),
            discovery=self.create_discovery_resolver(),
            zookeeper=ZooKeeperStorage(config.zookeeper, self._logger),
            cluster_domain=config.cluster_domain,
            kubernetes_timeout=config.kubernetes_timeout,
            logger=self._logger,
        )

    @property
    def logger(self) -> BoundLogger:
        """Logger passed to the created components."""
        return self._logger
