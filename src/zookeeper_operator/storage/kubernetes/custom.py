"""Storage layer for Kubernetes custom objects."""

from __future__ import annotations

from typing import Any

from kubernetes_asyncio import client
from kubernetes_asyncio.client import ApiClient, ApiException
from structlog.stdlib import BoundLogger

from ...constants import (
    AUTHENTICATION_GROUP,
    AUTHENTICATION_PLURAL,
    AUTHENTICATION_VERSION,
    CLUSTER_PLURAL,
    GROUP,
    VERSION,
    ZNODE_PLURAL,
)
from ...exceptions import KubernetesError
from ...timeout import Timeout

__all__ = [
    "AuthenticationClassStorage",
    "CustomStorage",
    "ZookeeperClusterStorage",
    "ZookeeperZnodeStorage",
]


class CustomStorage:
    """Storage layer for namespaced Kubernetes custom objects.

    Normally, this class should be subclassed to specialize it for a specific
    custom object type, which provides a slightly nicer API, but it can be
    used as-is if desired.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    group
        API group for the custom objects to handle.
    version
        API version for the custom objects to handle.
    plural
        API plural under which those custom objects are managed.
    kind
        Name of the custom object kind, used for error reporting.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        api_client: ApiClient,
        group: str,
        version: str,
        plural: str,
        kind: str,
        logger: BoundLogger,
    ) -> None:
        self._api = client.CustomObjectsApi(api_client)
        self._group = group
        self._version = version
        self._plural = plural
        self._kind = kind
        self._logger = logger

    async def read(
        self, name: str, namespace: str, timeout: Timeout
    ) -> dict[str, Any] | None:
        """Read a custom object.

        Parameters
        ----------
        name
            Name of the custom object.
        namespace
            Namespace of the custom object.
        timeout
            Timeout on operation.

        Returns
        -------
        dict or None
            Custom object, or `None` if it does not exist.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        """
        try:
            return await self._api.get_namespaced_custom_object(
                self._group,
                self._version,
                namespace,
                self._plural,
                name,
                _request_timeout=timeout.left(),
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

    async def patch_status(
        self,
        name: str,
        namespace: str,
        status: dict[str, Any],
        timeout: Timeout,
    ) -> None:
        """Merge fields into the status of a custom object.

        Parameters
        ----------
        name
            Name of the custom object.
        namespace
            Namespace of the custom object.
        status
            Status fields to set. Fields not mentioned are left alone.
        timeout
            Timeout on operation.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        """
        msg = f"Updating {self._kind} status"
        self._logger.debug(msg, name=name, namespace=namespace)
        try:
            await self._api.patch_namespaced_custom_object_status(
                self._group,
                self._version,
                namespace,
                self._plural,
                name,
                {"status": status},
                _content_type="application/merge-patch+json",
                _request_timeout=timeout.left(),
            )
        except ApiException as e:
            raise KubernetesError.from_exception(
                "Error updating object status",
                e,
                kind=self._kind,
                namespace=namespace,
                name=name,
            ) from e


class ZookeeperClusterStorage(CustomStorage):
    """Storage layer for ``ZookeeperCluster`` objects.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    logger
        Logger to use.
    """

    def __init__(self, api_client: ApiClient, logger: BoundLogger) -> None:
        super().__init__(
            api_client=api_client,
            group=GROUP,
            version=VERSION,
            plural=CLUSTER_PLURAL,
            kind="ZookeeperCluster",
            logger=logger,
        )


class ZookeeperZnodeStorage(CustomStorage):
    """Storage layer for ``ZookeeperZnode`` objects.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    logger
        Logger to use.
    """

    def __init__(self, api_client: ApiClient, logger: BoundLogger) -> None:
        super().__init__(
            api_client=api_client,
            group=GROUP,
            version=VERSION,
            plural=ZNODE_PLURAL,
            kind="ZookeeperZnode",
            logger=logger,
        )


class AuthenticationClassStorage:
    """Storage layer for cluster-scoped ``AuthenticationClass`` objects.

    Nothing is cached. Authentication classes are edited independently of
    the clusters that reference them, so every lookup goes to Kubernetes.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    logger
        Logger to use.
    """

    def __init__(self, api_client: ApiClient, logger: BoundLogger) -> None:
        self._api = client.CustomObjectsApi(api_client)
        self._logger = logger

    async def read(self, name: str, timeout: Timeout) -> dict[str, Any] | None:
        """Read an authentication class.

        Parameters
        ----------
        name
            Name of the authentication class.
        timeout
            Timeout on operation.

        Returns
        -------
        dict or None
            Custom object, or `None` if it does not exist.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        """
        self._logger.debug("Reading AuthenticationClass", name=name)
        try:
            return await self._api.get_cluster_custom_object(
                AUTHENTICATION_GROUP,
                AUTHENTICATION_VERSION,
                AUTHENTICATION_PLURAL,
                name,
                _request_timeout=timeout.left(),
            )
        except ApiException as e:
            if e.status == 404:
                return None
            raise KubernetesError.from_exception(
                "Error reading object",
                e,
                kind="AuthenticationClass",
                name=name,
            ) from e
