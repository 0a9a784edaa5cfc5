"""Fully merged configuration of a role group."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from ...constants import SECURITY_PROPERTIES_FILE, ZOO_CFG_FILE

__all__ = [
    "ResourceEnvelope",
    "RoleGroupConfig",
]


@dataclass(frozen=True)
class ResourceEnvelope:
    """Resource envelope of each server in a role group.

    Every field is populated after composition, since compiled-in defaults
    exist for all of them except the storage class.
    """

    cpu_min: str
    """CPU request, as a Kubernetes quantity."""

    cpu_max: str
    """CPU limit, as a Kubernetes quantity."""

    memory_limit: str
    """Memory request and limit, as a Kubernetes quantity."""

    storage_capacity: str
    """Size of the data volume, as a Kubernetes quantity."""

    storage_class: str | None = None
    """Storage class of the data volume, or the cluster default if `None`."""


@dataclass(frozen=True)
class RoleGroupConfig:
    """Configuration of one role group after merging role and group layers.

    Produced once per reconcile and not modified afterwards.
    """

    name: str
    """Name of the role group."""

    replicas: int
    """Number of servers in the role group."""

    resources: ResourceEnvelope
    """Resource envelope of each server."""

    affinity: dict[str, Any]
    """Kubernetes ``Affinity`` object in its JSON form."""

    graceful_shutdown_timeout: timedelta
    """How long a server is given to shut down cleanly."""

    myid_offset: int
    """Server identity of the first member of the role group."""

    overrides: dict[str, dict[str, str]] = field(default_factory=dict)
    """Property overrides by file name, including compiled-in defaults."""

    @property
    def zoo_cfg(self) -> dict[str, str]:
        """Properties to apply last when rendering ``zoo.cfg``."""
        return self.overrides.get(ZOO_CFG_FILE, {})

    @property
    def security_properties(self) -> dict[str, str]:
        """Properties to apply last when rendering ``security.properties``."""
        return self.overrides.get(SECURITY_PROPERTIES_FILE, {})
