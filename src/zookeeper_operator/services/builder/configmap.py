"""Construction of the ConfigMaps written by the operator."""

from __future__ import annotations

from kubernetes_asyncio.client import V1ConfigMap, V1ObjectMeta

from ...constants import (
    LABEL_COMPONENT,
    LABEL_MANAGED_BY,
    LABEL_NAME,
    LABEL_ROLE_GROUP,
    MANAGED_BY,
    SERVER_ROLE,
)
from ...models.domain.discovery import ConnectionDescriptor
from ...models.domain.kubernetes import OwnerObject
from ...util import role_group_name

__all__ = ["ConfigMapBuilder"]


class ConfigMapBuilder:
    """Construct ConfigMaps for role group configuration and discovery."""

    def build_role_group(
        self, owner: OwnerObject, group: str, files: dict[str, str]
    ) -> V1ConfigMap:
        """Build the ConfigMap holding the rendered files of a role group.

        Parameters
        ----------
        owner
            Cluster the role group belongs to.
        group
            Name of the role group.
        files
            Mapping of file name to rendered contents.

        Returns
        -------
        kubernetes_asyncio.client.V1ConfigMap
            ConfigMap named after the role group.
        """
        labels = self._build_labels(owner)
        labels[LABEL_COMPONENT] = SERVER_ROLE
        labels[LABEL_ROLE_GROUP] = group
        name = role_group_name(owner.name, group)
        return V1ConfigMap(
            metadata=self._build_metadata(owner, name, labels),
            data=dict(files),
        )

    def build_discovery(
        self, owner: OwnerObject, descriptor: ConnectionDescriptor
    ) -> V1ConfigMap:
        """Build the ConfigMap publishing a connection descriptor.

        Parameters
        ----------
        owner
            Cluster or znode publishing the descriptor.
        descriptor
            Connection descriptor to publish.

        Returns
        -------
        kubernetes_asyncio.client.V1ConfigMap
            ConfigMap whose name depends on the exposure mode.
        """
        name = descriptor.mode.config_map_name(owner.name)
        labels = self._build_labels(owner)
        return V1ConfigMap(
            metadata=self._build_metadata(owner, name, labels),
            data=descriptor.to_data(),
        )

    def _build_labels(self, owner: OwnerObject) -> dict[str, str]:
        return {LABEL_NAME: owner.name, LABEL_MANAGED_BY: MANAGED_BY}

    def _build_metadata(
        self, owner: OwnerObject, name: str, labels: dict[str, str]
    ) -> V1ObjectMeta:
        return V1ObjectMeta(
            name=name,
            namespace=owner.namespace,
            labels=labels,
            owner_references=[owner.to_owner_reference()],
        )
