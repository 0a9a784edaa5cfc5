"""Generic Kubernetes object storage supporting create, read, and replace.

Provides a generic Kubernetes object management class and its
instantiation for the ``ConfigMap`` objects the operator writes.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from kubernetes_asyncio import client
from kubernetes_asyncio.client import (
    ApiClient,
    ApiException,
    V1ConfigMap,
)
from structlog.stdlib import BoundLogger

from ...exceptions import KubernetesError
from ...models.domain.kubernetes import KubernetesModel
from ...timeout import Timeout

__all__ = [
    "ConfigMapStorage",
    "KubernetesObjectCreator",
]


class KubernetesObjectCreator[T: KubernetesModel]:
    """Generic Kubernetes object storage supporting create, read, and replace.

    This class provides a wrapper around any Kubernetes object type that
    implements create, read, and replace operations with logging and
    exception conversion.

    This class is not meant to be used directly by code outside of the
    Kubernetes storage layer. Use one of the kind-specific storage classes
    built on top of it instead.

    Parameters
    ----------
    create_method
        Method to create this type of object.
    read_method
        Method to read this type of object.
    replace_method
        Method to replace this type of object.
    object_type
        Type of object being acted on.
    kind
        Kubernetes kind of object being acted on.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        create_method: Callable[..., Awaitable[Any]],
        read_method: Callable[..., Awaitable[Any]],
        replace_method: Callable[..., Awaitable[Any]],
        object_type: type[T],
        kind: str,
        logger: BoundLogger,
    ) -> None:
        self._create = create_method
        self._read = read_method
        self._replace = replace_method
        self._type = object_type
        self._kind = kind
        self._logger = logger

    async def create(self, namespace: str, body: T, timeout: Timeout) -> None:
        """Create a new Kubernetes object.

        Parameters
        ----------
        namespace
            Namespace of the object.
        body
            New object.
        timeout
            Timeout on operation.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        """
        msg = f"Creating {self._kind}"
        self._logger.debug(msg, name=body.metadata.name, namespace=namespace)
        try:
            await self._create(
                namespace,
                body,
                _request_timeout=timeout.left(),
            )
        except ApiException as e:
            raise KubernetesError.from_exception(
                "Error creating object",
                e,
                kind=self._kind,
                namespace=namespace,
                name=body.metadata.name,
            ) from e

    async def read(
        self, name: str, namespace: str, timeout: Timeout
    ) -> T | None:
        """Read a Kubernetes object.

        Parameters
        ----------
        name
            Name of the object.
        namespace
            Namespace of the object.
        timeout
            Timeout on operation.

        Returns
        -------
        typing.Any or None
            Kubernetes object, or `None` if it does not exist.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        """
        try:
            return await self._read(
                name, namespace, _request_timeout=timeout.left()
            )
        except ApiException as e:
            if e.status == 404:
                return None
            raise KubernetesError.from_exception(
                "Error reading object",
                e,
                kind=self._kind,
                namespace=namespace,
                name=name,
            ) from e

    async def replace(
        self, namespace: str, body: T, timeout: Timeout
    ) -> None:
        """Replace an existing Kubernetes object.

        Parameters
        ----------
        namespace
            Namespace of the object.
        body
            New contents of the object.
        timeout
            Timeout on operation.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        """
        name = body.metadata.name
        msg = f"Replacing {self._kind}"
        self._logger.debug(msg, name=name, namespace=namespace)
        try:
            await self._replace(
                name,
                namespace,
                body,
                _request_timeout=timeout.left(),
            )
        except ApiException as e:
            raise KubernetesError.from_exception(
                "Error replacing object",
                e,
                kind=self._kind,
                namespace=namespace,
                name=name,
            ) from e


class ConfigMapStorage(KubernetesObjectCreator[V1ConfigMap]):
    """Storage layer for ``ConfigMap`` objects.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    logger
        Logger to use.
    """

    def __init__(self, api_client: ApiClient, logger: BoundLogger) -> None:
        api = client.CoreV1Api(api_client)
        super().__init__(
            create_method=api.create_namespaced_config_map,
            read_method=api.read_namespaced_config_map,
            replace_method=api.replace_namespaced_config_map,
            object_type=V1ConfigMap,
            kind="ConfigMap",
            logger=logger,
        )

    async def apply(
        self, namespace: str, body: V1ConfigMap, timeout: Timeout
    ) -> bool:
        """Create or update a ``ConfigMap`` if its content differs.

        Only the data, labels, and owner references are compared, so writing
        the same rendered content again does not modify the live object.

        Parameters
        ----------
        namespace
            Namespace of the object.
        body
            Desired object.
        timeout
            Timeout on operation.

        Returns
        -------
        bool
            `True` if the object was created or replaced, `False` if it was
            already up to date.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        """
        name = body.metadata.name
        current = await self.read(name, namespace, timeout)
        if current is None:
            await self.create(namespace, body, timeout)
            return True
        if _same_config_map(current, body):
            self._logger.debug(
                "ConfigMap is up to date", name=name, namespace=namespace
            )
            return False
        body.metadata.resource_version = current.metadata.resource_version
        await self.replace(namespace, body, timeout)
        return True


def _same_config_map(current: V1ConfigMap, desired: V1ConfigMap) -> bool:
    """Whether the live ConfigMap already has the desired content."""
    if (current.data or {}) != (desired.data or {}):
        return False
    current_labels = current.metadata.labels or {}
    for key, value in (desired.metadata.labels or {}).items():
        if current_labels.get(key) != value:
            return False
    current_owners = {o.uid for o in current.metadata.owner_references or []}
    desired_owners = {o.uid for o in desired.metadata.owner_references or []}
    return desired_owners <= current_owners
