"""Builders for Kubernetes objects normally maintained by Kubernetes."""

from __future__ import annotations

from kubernetes_asyncio.client import (
    V1Endpoint,
    V1EndpointConditions,
    V1EndpointSlice,
    V1ObjectMeta,
    V1Service,
    V1ServicePort,
    V1ServiceSpec,
)

__all__ = ["build_endpoint_slice", "build_node_port_service"]


def build_node_port_service(
    name: str, namespace: str, node_port: int | None
) -> V1Service:
    """Build the client Service of an externally exposed cluster.

    Parameters
    ----------
    name
        Name of the Service.
    namespace
        Namespace of the Service.
    node_port
        Node port assigned to the client port, or `None` if Kubernetes has
        not assigned one yet.
    """
    return V1Service(
        metadata=V1ObjectMeta(name=name, namespace=namespace),
        spec=V1ServiceSpec(
            type="NodePort",
            ports=[
                V1ServicePort(name="metrics", port=9505, node_port=30001),
                V1ServicePort(name="client", port=2282, node_port=node_port),
            ],
        ),
    )


def build_endpoint_slice(
    service: str, name: str, nodes: dict[str, bool | None]
) -> V1EndpointSlice:
    """Build an EndpointSlice backing a Service.

    Parameters
    ----------
    service
        Name of the Service the slice backs.
    name
        Name of the slice.
    nodes
        Mapping of node name to readiness of the endpoint running there.
        `None` leaves the readiness unknown.
    """
    endpoints = []
    for i, (node, ready) in enumerate(nodes.items()):
        endpoint = V1Endpoint(
            addresses=[f"10.0.0.{i + 1}"],
            conditions=V1EndpointConditions(ready=ready),
            node_name=node,
        )
        endpoints.append(endpoint)
    return V1EndpointSlice(
        address_type="IPv4",
        endpoints=endpoints,
        metadata=V1ObjectMeta(
            name=name, labels={"kubernetes.io/service-name": service}
        ),
    )
