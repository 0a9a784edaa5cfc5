"""Models for the ``ZookeeperZnode`` custom resource."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "ClusterRef",
    "ZookeeperZnodeSpec",
    "ZookeeperZnodeStatus",
]


class ClusterRef(BaseModel):
    """Reference to the cluster that hosts a znode."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    name: Annotated[str, Field(title="Name of the ZookeeperCluster")]

    namespace: Annotated[
        str | None,
        Field(
            title="Namespace of the ZookeeperCluster",
            description="Defaults to the namespace of the znode",
        ),
    ] = None


class ZookeeperZnodeSpec(BaseModel):
    """Specification of a ``ZookeeperZnode``."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    cluster_ref: ClusterRef


class ZookeeperZnodeStatus(BaseModel):
    """Status of a ``ZookeeperZnode`` written by the operator."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    znode_path: Annotated[
        str | None,
        Field(
            title="Realized znode path",
            description="Unset until the znode has been created",
        ),
    ] = None
