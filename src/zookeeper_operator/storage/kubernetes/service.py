"""Storage layer for ``Service`` objects."""

from __future__ import annotations

from kubernetes_asyncio import client
from kubernetes_asyncio.client import ApiClient, ApiException, V1Service
from structlog.stdlib import BoundLogger

from ...exceptions import KubernetesError
from ...timeout import Timeout

__all__ = ["ServiceStorage"]


class ServiceStorage:
    """Read-only storage layer for ``Service`` objects.

    Services of a cluster are created by its workload controller, so the
    operator only needs to read the node ports Kubernetes assigned to them.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    logger
        Logger to use.
    """

    def __init__(self, api_client: ApiClient, logger: BoundLogger) -> None:
        self._api = client.CoreV1Api(api_client)
        self._logger = logger

    async def read(
        self, name: str, namespace: str, timeout: Timeout
    ) -> V1Service | None:
        """Read a Service.

        Parameters
        ----------
        name
            Name of the Service.
        namespace
            Namespace of the Service.
        timeout
            Timeout on operation.

        Returns
        -------
        kubernetes_asyncio.client.V1Service or None
            The Service, or `None` if it does not exist.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        """
        self._logger.debug("Reading Service", name=name, namespace=namespace)
        try:
            return await self._api.read_namespaced_service(
                name, namespace, _request_timeout=timeout.left()
            )
        except ApiException as e:
            if e.status == 404:
                return None
            raise KubernetesError.from_exception(
                "Error reading object",
                e,
                kind="Service",
                namespace=namespace,
                name=name,
            ) from e
