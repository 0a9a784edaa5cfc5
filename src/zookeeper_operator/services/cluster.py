"""Reconciliation of ``ZookeeperCluster`` objects."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from structlog.stdlib import BoundLogger

from ..exceptions import ValidationError
from ..models.domain.config import RoleGroupConfig
from ..models.domain.kubernetes import OwnerObject
from ..models.v1alpha1.cluster import (
    ZookeeperClusterSpec,
    ZookeeperClusterStatus,
)
from ..storage.kubernetes.creator import ConfigMapStorage
from ..storage.kubernetes.custom import ZookeeperClusterStorage
from ..timeout import Timeout
from .builder.configmap import ConfigMapBuilder
from .composer import ConfigComposer
from .discovery import DiscoveryResolver
from .ensemble import EnsembleConfigRenderer
from .security import SecurityResolver

__all__ = ["ClusterReconciler"]


class ClusterReconciler:
    """Render the configuration of a cluster and publish its addresses.

    The workloads themselves are not managed here. This writes one
    ConfigMap of rendered files per role group, records the client
    connection strings in the cluster status, and publishes the cluster's
    own connection descriptors.

    Parameters
    ----------
    composer
        Merger of role and role group configuration.
    security_resolver
        Resolver for the security of the cluster.
    renderer
        Renderer of the configuration files.
    builder
        Builder for the role group ConfigMaps.
    config_map_storage
        Storage for the role group ConfigMaps.
    cluster_storage
        Storage for clusters, used to record status.
    discovery
        Resolver and publisher of connection strings.
    kubernetes_timeout
        Bound on the Kubernetes calls of one reconcile.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        composer: ConfigComposer,
        security_resolver: SecurityResolver,
        renderer: EnsembleConfigRenderer,
        builder: ConfigMapBuilder,
        config_map_storage: ConfigMapStorage,
        cluster_storage: ZookeeperClusterStorage,
        discovery: DiscoveryResolver,
        kubernetes_timeout: timedelta,
        logger: BoundLogger,
    ) -> None:
        self._composer = composer
        self._security = security_resolver
        self._renderer = renderer
        self._builder = builder
        self._config_maps = config_map_storage
        self._clusters = cluster_storage
        self._discovery = discovery
        self._kubernetes_timeout = kubernetes_timeout
        self._logger = logger

    async def reconcile(self, body: dict[str, Any]) -> dict[str, str]:
        """Reconcile a cluster.

        Parameters
        ----------
        body
            The ``ZookeeperCluster`` object.

        Returns
        -------
        dict of str
            Client connection string of each role group.

        Raises
        ------
        KubernetesError
            Raised for Kubernetes API failures.
        MissingObjectError
            Raised if an object the cluster depends on does not exist yet.
        ValidationError
            Raised if the cluster is invalid.
        """
        owner = OwnerObject.from_body(body)
        logger = self._logger.bind(namespace=owner.namespace, name=owner.name)
        try:
            spec = ZookeeperClusterSpec.model_validate(body.get("spec") or {})
        except PydanticValidationError as e:
            raise ValidationError.from_exception(
                e, kind=owner.kind, namespace=owner.namespace, name=owner.name
            ) from e
        timeout = Timeout(
            self._kubernetes_timeout, f"Reconciling cluster {owner.name}"
        )
        security = await self._security.resolve(spec.cluster_config, timeout)

        configs = [
            self._composer.compose(
                owner.name,
                name,
                group,
                spec.servers,
                min_server_id=spec.cluster_config.min_server_id,
            )
            for name, group in sorted(spec.servers.role_groups.items())
        ]
        self._check_identities(logger, configs)

        connections = {}
        for config in configs:
            files = self._renderer.render(
                owner.name, owner.namespace, config, security
            )
            config_map = self._builder.build_role_group(
                owner, config.name, files
            )
            if await self._config_maps.apply(
                owner.namespace, config_map, timeout
            ):
                logger.info(
                    "Updated role group configuration", role_group=config.name
                )
            members = self._renderer.members(
                owner.name, owner.namespace, config
            )
            hosts = (f"{m.host}:{security.client_port}" for m in members)
            connections[config.name] = ",".join(hosts)

        current = body.get("status") or {}
        status = ZookeeperClusterStatus.model_validate(current)
        if status.client_connections != connections:
            update = ZookeeperClusterStatus(client_connections=connections)
            await self._clusters.patch_status(
                owner.name,
                owner.namespace,
                update.model_dump(mode="json", by_alias=True),
                timeout,
            )
            logger.info("Recorded client connections in status")

        descriptors = await self._discovery.resolve(
            owner.name, owner.namespace, spec, security, "/", timeout
        )
        await self._discovery.publish(owner, descriptors, timeout)
        logger.debug("Reconciled cluster")
        return connections

    def _check_identities(
        self, logger: BoundLogger, configs: list[RoleGroupConfig]
    ) -> None:
        """Warn about role groups whose server identities overlap.

        Every role group defaults to the same identity offset, so overlaps
        are expected in clusters with several role groups that do not set
        ``myidOffset``.
        """
        seen: dict[int, str] = {}
        for config in configs:
            start = config.myid_offset
            for myid in range(start, start + config.replicas):
                if myid in seen:
                    logger.warning(
                        "Server identities of role groups overlap",
                        myid=myid,
                        role_groups=[seen[myid], config.name],
                    )
                    return
                seen[myid] = config.name
