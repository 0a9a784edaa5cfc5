"""Models for the ``ZookeeperCluster`` custom resource."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from safir.pydantic import HumanTimedelta

__all__ = [
    "AuthenticationSpec",
    "ClusterConfigSpec",
    "CPUResource",
    "ListenerClass",
    "MemoryResource",
    "ResourcesSpec",
    "RoleGroupSpec",
    "ServerConfigSpec",
    "ServerSpec",
    "StorageResource",
    "ZookeeperClusterSpec",
    "ZookeeperClusterStatus",
    "ZookeeperTls",
]


class ListenerClass(str, Enum):
    """How the ensemble is exposed to clients."""

    CLUSTER_INTERNAL = "cluster-internal"
    """Reachable only inside the Kubernetes cluster network."""

    EXTERNAL_UNSTABLE = "external-unstable"
    """Additionally reachable through node ports on the Kubernetes nodes."""


class _ResourceModel(BaseModel):
    """Common settings for custom resource models."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )


class CPUResource(_ResourceModel):
    """CPU request and limit for a server container."""

    min: Annotated[
        str | None,
        Field(title="CPU request", examples=["100m"]),
    ] = None

    max: Annotated[
        str | None,
        Field(title="CPU limit", examples=["200m"]),
    ] = None


class MemoryResource(_ResourceModel):
    """Memory limit for a server container."""

    limit: Annotated[
        str | None,
        Field(title="Memory limit", examples=["1Gi"]),
    ] = None


class StorageResource(_ResourceModel):
    """Size of the data volume of a server."""

    capacity: Annotated[
        str | None,
        Field(title="Storage capacity", examples=["1Gi"]),
    ] = None

    storage_class: Annotated[
        str | None,
        Field(title="Storage class of the data volume"),
    ] = None


class ResourcesSpec(_ResourceModel):
    """Resource envelope of a server.

    Each of the three parts is resolved independently when role and role
    group configuration are merged.
    """

    cpu: CPUResource | None = None

    memory: MemoryResource | None = None

    storage: StorageResource | None = None


class ServerConfigSpec(_ResourceModel):
    """Configuration of a server, at the role or role group level."""

    resources: Annotated[
        ResourcesSpec | None,
        Field(title="Resource envelope"),
    ] = None

    affinity: Annotated[
        dict[str, Any] | None,
        Field(
            title="Pod affinity",
            description="Kubernetes ``Affinity`` object in its JSON form",
        ),
    ] = None

    graceful_shutdown_timeout: Annotated[
        HumanTimedelta | None,
        Field(title="Graceful shutdown timeout", examples=["120s"]),
    ] = None

    myid_offset: Annotated[
        int | None,
        Field(
            title="Server identity offset",
            description=(
                "Identity of the first server of the role group. Role groups"
                " of one cluster must use non-overlapping identity ranges."
            ),
            ge=1,
        ),
    ] = None

    init_limit: Annotated[int | None, Field(title="initLimit", ge=0)] = None

    sync_limit: Annotated[int | None, Field(title="syncLimit", ge=0)] = None

    tick_time: Annotated[int | None, Field(title="tickTime", ge=0)] = None


class RoleGroupSpec(_ResourceModel):
    """One group of identically configured servers."""

    replicas: Annotated[
        int,
        Field(title="Number of servers in the role group", ge=1),
    ] = 1

    config: ServerConfigSpec | None = None

    config_overrides: Annotated[
        dict[str, dict[str, str]] | None,
        Field(
            title="Configuration file overrides",
            description="Mapping of file name to property to value",
        ),
    ] = None


class ServerSpec(_ResourceModel):
    """The server role of a cluster."""

    config: ServerConfigSpec | None = None

    config_overrides: dict[str, dict[str, str]] | None = None

    role_groups: Annotated[
        dict[str, RoleGroupSpec],
        Field(title="Role groups of the server role"),
    ] = Field(default_factory=dict)


class AuthenticationSpec(_ResourceModel):
    """Reference to an ``AuthenticationClass`` used for client connections."""

    authentication_class: Annotated[
        str, Field(title="Name of the AuthenticationClass")
    ]


class ZookeeperTls(_ResourceModel):
    """Transport security settings of a cluster."""

    quorum_secret_class: Annotated[
        str | None,
        Field(
            title="Secret class for quorum communication",
            description="Servers authenticate each other with these certs",
        ),
    ] = "tls"

    server_secret_class: Annotated[
        str | None,
        Field(
            title="Secret class for client connections",
            description="If unset, clients connect without TLS",
        ),
    ] = "tls"


class ClusterConfigSpec(_ResourceModel):
    """Cluster-wide configuration."""

    listener_class: Annotated[
        ListenerClass,
        Field(title="How the ensemble is exposed to clients"),
    ] = ListenerClass.CLUSTER_INTERNAL

    min_server_id: Annotated[
        int,
        Field(
            title="Default server identity offset",
            description="Used for role groups that do not set myidOffset",
            ge=1,
        ),
    ] = 1

    authentication: list[AuthenticationSpec] = Field(default_factory=list)

    tls: ZookeeperTls | None = Field(default_factory=ZookeeperTls)


class ZookeeperClusterSpec(_ResourceModel):
    """Specification of a ``ZookeeperCluster``."""

    cluster_config: ClusterConfigSpec = Field(
        default_factory=ClusterConfigSpec
    )

    servers: ServerSpec


class ZookeeperClusterStatus(_ResourceModel):
    """Status of a ``ZookeeperCluster`` written by the operator."""

    client_connections: Annotated[
        dict[str, str],
        Field(
            title="Client connection strings",
            description="Mapping of role group to comma-joined host:port list",
        ),
    ] = Field(default_factory=dict)
