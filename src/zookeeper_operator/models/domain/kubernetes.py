"""Data types for interacting with Kubernetes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Self

from kubernetes_asyncio.client import V1ObjectMeta, V1OwnerReference

from ...constants import GROUP, VERSION

__all__ = [
    "KubernetesModel",
    "OwnerObject",
]


class KubernetesModel(Protocol):
    """Protocol for Kubernetes object models.

    kubernetes-asyncio_ doesn't currently expose type information, so this
    tells mypy that all the object models we deal with will have a metadata
    attribute.
    """

    metadata: V1ObjectMeta

    def to_dict(self, *, serialize: bool = False) -> dict[str, Any]: ...


@dataclass(frozen=True)
class OwnerObject:
    """A custom object that owns the Kubernetes objects derived from it."""

    kind: str
    """Kind of the custom object."""

    name: str
    """Name of the custom object."""

    namespace: str
    """Namespace of the custom object."""

    uid: str
    """Unique identifier assigned by Kubernetes."""

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> Self:
        """Build from the body of a custom object.

        Parameters
        ----------
        body
            Custom object as delivered to a handler or read from Kubernetes.
        """
        metadata = body["metadata"]
        return cls(
            kind=body["kind"],
            name=metadata["name"],
            namespace=metadata["namespace"],
            uid=metadata["uid"],
        )

    def to_owner_reference(self) -> V1OwnerReference:
        """Owner reference pointing at this object.

        Derived objects are garbage-collected when this object is deleted.
        """
        return V1OwnerReference(
            api_version=f"{GROUP}/{VERSION}",
            kind=self.kind,
            name=self.name,
            uid=self.uid,
            block_owner_deletion=True,
            controller=True,
        )
