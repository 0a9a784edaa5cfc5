"""Utility functions shared by the services."""

from __future__ import annotations

from collections.abc import Mapping

from .constants import SERVER_ROLE

__all__ = [
    "role_group_name",
    "service_fqdn",
    "to_properties",
]


def role_group_name(cluster: str, group: str) -> str:
    """Name of the StatefulSet and governing Service of a role group.

    Parameters
    ----------
    cluster
        Name of the cluster.
    group
        Name of the role group.

    Returns
    -------
    str
        Name shared by the role group's StatefulSet, governing Service, and
        rendered ConfigMap.
    """
    return f"{cluster}-{SERVER_ROLE}-{group}"


def service_fqdn(name: str, namespace: str, cluster_domain: str) -> str:
    """Fully-qualified in-cluster DNS name of a Service.

    Parameters
    ----------
    name
        Name of the Service. This may also be a pod name followed by the
        name of the governing Service, separated by a period.
    namespace
        Namespace of the Service.
    cluster_domain
        Kubernetes cluster domain. If empty, the name ends in ``.svc``.

    Returns
    -------
    str
        DNS name of the Service.
    """
    fqdn = f"{name}.{namespace}.svc"
    if cluster_domain:
        fqdn += f".{cluster_domain}"
    return fqdn


def to_properties(properties: Mapping[str, str]) -> str:
    """Serialize properties as sorted ``key=value`` lines.

    Output is stable for identical input regardless of insertion order, so
    that rewriting unchanged configuration produces identical objects.

    Parameters
    ----------
    properties
        Properties to serialize.

    Returns
    -------
    str
        One ``key=value`` line per property, sorted by key, with a trailing
        newline after each line.
    """
    return "".join(f"{k}={properties[k]}\n" for k in sorted(properties))
