"""Lifecycle of the znodes requested by ``ZookeeperZnode`` objects."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from structlog.stdlib import BoundLogger

from ..exceptions import MissingObjectError, ValidationError
from ..models.domain.kubernetes import OwnerObject
from ..models.domain.security import ResolvedSecurity
from ..models.v1alpha1.cluster import ZookeeperClusterSpec
from ..models.v1alpha1.znode import ZookeeperZnodeSpec, ZookeeperZnodeStatus
from ..storage.kubernetes.custom import (
    ZookeeperClusterStorage,
    ZookeeperZnodeStorage,
)
from ..storage.zookeeper import ZooKeeperStorage
from ..timeout import Timeout
from ..util import service_fqdn
from .discovery import DiscoveryResolver
from .security import SecurityResolver

__all__ = ["ZNodeLifecycleManager"]


class ZNodeLifecycleManager:
    """Create, record, publish, and delete requested znodes.

    Each ``ZookeeperZnode`` owns exactly one znode, at a path derived from
    its UID so that paths never collide and never depend on user input.

    Parameters
    ----------
    cluster_storage
        Storage for the clusters hosting znodes.
    znode_storage
        Storage for the znode requests, used to record status.
    security_resolver
        Resolver for the security of the hosting cluster.
    discovery
        Resolver and publisher of connection strings.
    zookeeper
        Storage for znodes in the ensemble.
    cluster_domain
        Kubernetes cluster domain used in the ensemble address.
    kubernetes_timeout
        Bound on the Kubernetes calls of one reconcile.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        cluster_storage: ZookeeperClusterStorage,
        znode_storage: ZookeeperZnodeStorage,
        security_resolver: SecurityResolver,
        discovery: DiscoveryResolver,
        zookeeper: ZooKeeperStorage,
        cluster_domain: str,
        kubernetes_timeout: timedelta,
        logger: BoundLogger,
    ) -> None:
        self._clusters = cluster_storage
        self._znodes = znode_storage
        self._security = security_resolver
        self._discovery = discovery
        self._zookeeper = zookeeper
        self._cluster_domain = cluster_domain
        self._kubernetes_timeout = kubernetes_timeout
        self._logger = logger

    @staticmethod
    def znode_path(uid: str) -> str:
        """Path of the znode owned by the request with the given UID."""
        return f"/znode-{uid}"

    async def reconcile(self, body: dict[str, Any]) -> str:
        """Make sure the requested znode exists and is published.

        The znode is created first, then its path is recorded in the status
        of the request, and only then are connection strings scoped to it
        published.

        Parameters
        ----------
        body
            The ``ZookeeperZnode`` object.

        Returns
        -------
        str
            Path of the znode.

        Raises
        ------
        KubernetesError
            Raised for Kubernetes API failures.
        MissingObjectError
            Raised if the hosting cluster or an object it depends on does not
            exist.
        ValidationError
            Raised if the request or its cluster is invalid.
        ZooKeeperError
            Raised if the ensemble could not be reached or the request
            failed.
        """
        owner = OwnerObject.from_body(body)
        path = self.znode_path(owner.uid)
        logger = self._logger.bind(
            namespace=owner.namespace, name=owner.name, path=path
        )
        spec = self._parse_spec(owner, body)
        timeout = Timeout(
            self._kubernetes_timeout, f"Reconciling znode {owner.name}"
        )

        cluster = spec.cluster_ref.name
        cluster_namespace = spec.cluster_ref.namespace or owner.namespace
        cluster_spec = await self._get_cluster(
            cluster, cluster_namespace, timeout
        )
        if cluster_spec is None:
            msg = f"ZookeeperCluster {cluster_namespace}/{cluster} not found"
            raise MissingObjectError(
                msg,
                kind="ZookeeperCluster",
                namespace=cluster_namespace,
                name=cluster,
            )
        security = await self._security.resolve(
            cluster_spec.cluster_config, timeout
        )

        hosts = self._ensemble_address(cluster, cluster_namespace, security)
        await self._zookeeper.ensure_znode(hosts, path)

        status = ZookeeperZnodeStatus.model_validate(body.get("status") or {})
        if status.znode_path != path:
            update = ZookeeperZnodeStatus(znode_path=path)
            await self._znodes.patch_status(
                owner.name,
                owner.namespace,
                update.model_dump(mode="json", by_alias=True),
                timeout,
            )
            logger.info("Recorded znode path in status")

        descriptors = await self._discovery.resolve(
            cluster, cluster_namespace, cluster_spec, security, path, timeout
        )
        await self._discovery.publish(owner, descriptors, timeout)
        logger.debug("Reconciled znode")
        return path

    async def cleanup(self, body: dict[str, Any]) -> None:
        """Delete the requested znode and everything below it.

        If the hosting cluster no longer exists, the ensemble and its data
        are gone as well, so there is nothing left to delete.

        Parameters
        ----------
        body
            The ``ZookeeperZnode`` object being deleted.

        Raises
        ------
        KubernetesError
            Raised for Kubernetes API failures.
        MissingObjectError
            Raised if an object the cluster depends on does not exist.
        ValidationError
            Raised if the request or its cluster is invalid.
        ZooKeeperError
            Raised if the ensemble could not be reached or the request
            failed.
        """
        owner = OwnerObject.from_body(body)
        status = ZookeeperZnodeStatus.model_validate(body.get("status") or {})
        path = status.znode_path or self.znode_path(owner.uid)
        logger = self._logger.bind(
            namespace=owner.namespace, name=owner.name, path=path
        )
        spec = self._parse_spec(owner, body)
        timeout = Timeout(
            self._kubernetes_timeout, f"Deleting znode {owner.name}"
        )

        cluster = spec.cluster_ref.name
        cluster_namespace = spec.cluster_ref.namespace or owner.namespace
        cluster_spec = await self._get_cluster(
            cluster, cluster_namespace, timeout
        )
        if cluster_spec is None:
            logger.warning(
                "ZookeeperCluster not found, assuming znode is gone",
                cluster=cluster,
                cluster_namespace=cluster_namespace,
            )
            return
        security = await self._security.resolve(
            cluster_spec.cluster_config, timeout
        )

        hosts = self._ensemble_address(cluster, cluster_namespace, security)
        await self._zookeeper.delete_znode(hosts, path)

    def _ensemble_address(
        self, cluster: str, namespace: str, security: ResolvedSecurity
    ) -> str:
        """Address of the cluster Service, used by the operator itself."""
        host = service_fqdn(cluster, namespace, self._cluster_domain)
        return f"{host}:{security.client_port}"

    async def _get_cluster(
        self, name: str, namespace: str, timeout: Timeout
    ) -> ZookeeperClusterSpec | None:
        obj = await self._clusters.read(name, namespace, timeout)
        if obj is None:
            return None
        try:
            return ZookeeperClusterSpec.model_validate(obj.get("spec") or {})
        except PydanticValidationError as e:
            raise ValidationError.from_exception(
                e, kind="ZookeeperCluster", namespace=namespace, name=name
            ) from e

    def _parse_spec(
        self, owner: OwnerObject, body: dict[str, Any]
    ) -> ZookeeperZnodeSpec:
        try:
            return ZookeeperZnodeSpec.model_validate(body.get("spec") or {})
        except PydanticValidationError as e:
            raise ValidationError.from_exception(
                e, kind=owner.kind, namespace=owner.namespace, name=owner.name
            ) from e
