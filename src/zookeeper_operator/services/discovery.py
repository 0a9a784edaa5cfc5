"""Resolution and publication of ensemble connection strings."""

from __future__ import annotations

from kubernetes_asyncio.client import V1Endpoint, V1EndpointSlice, V1Service
from structlog.stdlib import BoundLogger

from ..constants import CLIENT_PORT_NAME
from ..exceptions import MissingObjectError, ValidationError
from ..models.domain.discovery import ConnectionDescriptor, ExposureMode
from ..models.domain.kubernetes import OwnerObject
from ..models.domain.security import ResolvedSecurity
from ..models.v1alpha1.cluster import ListenerClass, ZookeeperClusterSpec
from ..storage.kubernetes.creator import ConfigMapStorage
from ..storage.kubernetes.endpoints import EndpointSliceStorage
from ..storage.kubernetes.service import ServiceStorage
from ..timeout import Timeout
from ..util import role_group_name, service_fqdn
from .builder.configmap import ConfigMapBuilder

__all__ = ["DiscoveryResolver"]


class DiscoveryResolver:
    """Compute and publish how clients reach an ensemble.

    Addresses for clients inside the Kubernetes cluster are synthesized from
    the declared role groups. Addresses for external clients are looked up
    from the cluster Service and its EndpointSlices, and are only computed
    for clusters exposed with the ``external-unstable`` listener class.

    Parameters
    ----------
    config_map_storage
        Storage for the published ConfigMaps.
    service_storage
        Storage for the cluster Service.
    endpoint_slice_storage
        Storage for the EndpointSlices backing the cluster Service.
    builder
        Builder for the published ConfigMaps.
    cluster_domain
        Kubernetes cluster domain used in in-cluster host names.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        config_map_storage: ConfigMapStorage,
        service_storage: ServiceStorage,
        endpoint_slice_storage: EndpointSliceStorage,
        builder: ConfigMapBuilder,
        cluster_domain: str,
        logger: BoundLogger,
    ) -> None:
        self._config_maps = config_map_storage
        self._services = service_storage
        self._endpoint_slices = endpoint_slice_storage
        self._builder = builder
        self._cluster_domain = cluster_domain
        self._logger = logger

    async def resolve(
        self,
        cluster: str,
        namespace: str,
        spec: ZookeeperClusterSpec,
        security: ResolvedSecurity,
        chroot: str,
        timeout: Timeout,
    ) -> list[ConnectionDescriptor]:
        """Resolve connection descriptors for every applicable exposure mode.

        Parameters
        ----------
        cluster
            Name of the cluster.
        namespace
            Namespace of the cluster.
        spec
            Specification of the cluster.
        security
            Resolved security of the cluster.
        chroot
            Path clients should be scoped to.
        timeout
            Timeout on Kubernetes operations.

        Returns
        -------
        list of ConnectionDescriptor
            The in-cluster descriptor, followed by the external descriptor if
            the cluster is exposed externally.

        Raises
        ------
        KubernetesError
            Raised for Kubernetes API failures.
        MissingObjectError
            Raised if the objects needed for external addresses do not exist
            yet.
        ValidationError
            Raised if the chroot is not an absolute path.
        """
        descriptors = [
            self.in_cluster(cluster, namespace, spec, security, chroot)
        ]
        listener_class = spec.cluster_config.listener_class
        if listener_class == ListenerClass.EXTERNAL_UNSTABLE:
            descriptor = await self.externally_exposed(
                cluster, namespace, security, chroot, timeout
            )
            descriptors.append(descriptor)
        return descriptors

    def in_cluster(
        self,
        cluster: str,
        namespace: str,
        spec: ZookeeperClusterSpec,
        security: ResolvedSecurity,
        chroot: str,
    ) -> ConnectionDescriptor:
        """Compute addresses of every server pod for in-cluster clients.

        Parameters
        ----------
        cluster
            Name of the cluster.
        namespace
            Namespace of the cluster.
        spec
            Specification of the cluster.
        security
            Resolved security of the cluster.
        chroot
            Path clients should be scoped to.

        Returns
        -------
        ConnectionDescriptor
            Hosts sorted by role group name and then by pod ordinal, all
            using the effective client port.

        Raises
        ------
        ValidationError
            Raised if the chroot is not an absolute path.
        """
        chroot = self._check_chroot(chroot)
        port = security.client_port
        hosts = []
        for group in sorted(spec.servers.role_groups):
            replicas = spec.servers.role_groups[group].replicas
            name = role_group_name(cluster, group)
            for i in range(replicas):
                pod = f"{name}-{i}.{name}"
                host = service_fqdn(pod, namespace, self._cluster_domain)
                hosts.append(f"{host}:{port}")
        if not hosts:
            self._logger.warning(
                "Cluster declares no role groups, using cluster Service",
                cluster=cluster,
                namespace=namespace,
            )
            host = service_fqdn(cluster, namespace, self._cluster_domain)
            hosts.append(f"{host}:{port}")
        return ConnectionDescriptor(
            mode=ExposureMode.IN_CLUSTER, hosts=hosts, port=port, chroot=chroot
        )

    async def externally_exposed(
        self,
        cluster: str,
        namespace: str,
        security: ResolvedSecurity,
        chroot: str,
        timeout: Timeout,
    ) -> ConnectionDescriptor:
        """Compute node addresses for clients outside the cluster.

        Parameters
        ----------
        cluster
            Name of the cluster, which is also the name of its Service.
        namespace
            Namespace of the cluster.
        security
            Resolved security of the cluster. Its client port is published
            as the port, while hosts carry the node port.
        chroot
            Path clients should be scoped to.
        timeout
            Timeout on Kubernetes operations.

        Returns
        -------
        ConnectionDescriptor
            One ``node:nodePort`` entry for each distinct node running a
            ready server, sorted.

        Raises
        ------
        KubernetesError
            Raised for Kubernetes API failures.
        MissingObjectError
            Raised if the Service, its client node port, its EndpointSlices,
            or any ready endpoint is missing.
        ValidationError
            Raised if the chroot is not an absolute path.
        """
        chroot = self._check_chroot(chroot)
        service = await self._services.read(cluster, namespace, timeout)
        if not service:
            msg = f"Service {cluster} not found"
            raise MissingObjectError(
                msg, kind="Service", namespace=namespace, name=cluster
            )
        node_port = self._get_node_port(service, namespace)

        slices = await self._endpoint_slices.list_for_service(
            cluster, namespace, timeout
        )
        if not slices:
            msg = f"No EndpointSlices found for Service {cluster}"
            raise MissingObjectError(
                msg, kind="EndpointSlice", namespace=namespace
            )
        nodes = self._get_ready_nodes(slices)
        if not nodes:
            msg = f"No ready endpoints found for Service {cluster}"
            raise MissingObjectError(
                msg, kind="EndpointSlice", namespace=namespace
            )

        return ConnectionDescriptor(
            mode=ExposureMode.EXTERNALLY_EXPOSED,
            hosts=[f"{n}:{node_port}" for n in nodes],
            port=security.client_port,
            chroot=chroot,
        )

    async def publish(
        self,
        owner: OwnerObject,
        descriptors: list[ConnectionDescriptor],
        timeout: Timeout,
    ) -> None:
        """Write connection descriptors to ConfigMaps in the owner namespace.

        Parameters
        ----------
        owner
            Object publishing the descriptors, which owns the ConfigMaps.
        descriptors
            Descriptors to publish.
        timeout
            Timeout on Kubernetes operations.

        Raises
        ------
        KubernetesError
            Raised for Kubernetes API failures.
        """
        for descriptor in descriptors:
            config_map = self._builder.build_discovery(owner, descriptor)
            changed = await self._config_maps.apply(
                owner.namespace, config_map, timeout
            )
            if changed:
                self._logger.info(
                    "Published connection string",
                    config_map=config_map.metadata.name,
                    namespace=owner.namespace,
                    connection=descriptor.connection_string,
                )

    def _check_chroot(self, chroot: str) -> str:
        if not chroot:
            self._logger.warning("No chroot given, using /")
            return "/"
        if not chroot.startswith("/"):
            msg = f"Chroot {chroot} must start with /"
            raise ValidationError(msg)
        return chroot

    def _get_node_port(self, service: V1Service, namespace: str) -> int:
        """Find the node port bound to the client port of a Service."""
        name = service.metadata.name
        for port in service.spec.ports or []:
            if port.name == CLIENT_PORT_NAME and port.node_port:
                return port.node_port
        msg = f"Service {name} has no node port for {CLIENT_PORT_NAME}"
        raise MissingObjectError(
            msg, kind="Service", namespace=namespace, name=name
        )

    def _get_ready_nodes(self, slices: list[V1EndpointSlice]) -> list[str]:
        """Collect the distinct nodes running ready endpoints, sorted."""
        nodes = set()
        for endpoint_slice in slices:
            for endpoint in endpoint_slice.endpoints or []:
                if endpoint.node_name and _is_ready(endpoint):
                    nodes.add(endpoint.node_name)
        return sorted(nodes)


def _is_ready(endpoint: V1Endpoint) -> bool:
    """Whether an endpoint is ready. An unknown state counts as ready."""
    conditions = endpoint.conditions
    if conditions is None or conditions.ready is None:
        return True
    return bool(conditions.ready)
