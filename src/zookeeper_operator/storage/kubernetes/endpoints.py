"""Storage layer for ``EndpointSlice`` objects."""

from __future__ import annotations

from kubernetes_asyncio import client
from kubernetes_asyncio.client import ApiClient, ApiException, V1EndpointSlice
from structlog.stdlib import BoundLogger

from ...constants import SERVICE_NAME_LABEL
from ...exceptions import KubernetesError
from ...timeout import Timeout

__all__ = ["EndpointSliceStorage"]


class EndpointSliceStorage:
    """Storage layer for ``EndpointSlice`` objects.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    logger
        Logger to use.
    """

    def __init__(self, api_client: ApiClient, logger: BoundLogger) -> None:
        self._api = client.DiscoveryV1Api(api_client)
        self._logger = logger

    async def list_for_service(
        self, service: str, namespace: str, timeout: Timeout
    ) -> list[V1EndpointSlice]:
        """List the EndpointSlices backing a Service.

        Parameters
        ----------
        service
            Name of the Service.
        namespace
            Namespace of the Service.
        timeout
            Timeout on operation.

        Returns
        -------
        list of kubernetes_asyncio.client.V1EndpointSlice
            EndpointSlices labeled as belonging to that Service.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        """
        selector = f"{SERVICE_NAME_LABEL}={service}"
        self._logger.debug(
            "Listing EndpointSlices", namespace=namespace, service=service
        )
        try:
            slices = await self._api.list_namespaced_endpoint_slice(
                namespace,
                label_selector=selector,
                _request_timeout=timeout.left(),
            )
        except ApiException as e:
            raise KubernetesError.from_exception(
                "Error listing objects",
                e,
                kind="EndpointSlice",
                namespace=namespace,
            ) from e
        return slices.items
