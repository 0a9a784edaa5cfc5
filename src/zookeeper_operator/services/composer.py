"""Merging of role and role group configuration."""

from __future__ import annotations

from typing import Any

from ..constants import (
    DATA_DIR,
    DEFAULT_GRACEFUL_SHUTDOWN,
    DEFAULT_INIT_LIMIT,
    DEFAULT_MYID_OFFSET,
    DEFAULT_SYNC_LIMIT,
    DEFAULT_TICK_TIME,
    LABEL_COMPONENT,
    LABEL_NAME,
    POD_ANTI_AFFINITY_WEIGHT,
    SECURITY_PROPERTIES_FILE,
    SERVER_ROLE,
    ZOO_CFG_FILE,
)
from ..models.domain.config import ResourceEnvelope, RoleGroupConfig
from ..models.v1alpha1.cluster import (
    ResourcesSpec,
    RoleGroupSpec,
    ServerConfigSpec,
    ServerSpec,
)

__all__ = ["ConfigComposer"]

_DEFAULT_CPU_MIN = "100m"
_DEFAULT_CPU_MAX = "200m"
_DEFAULT_MEMORY_LIMIT = "1Gi"
_DEFAULT_STORAGE_CAPACITY = "1Gi"

_DEFAULT_SECURITY_PROPERTIES = {
    "networkaddress.cache.ttl": "5",
    "networkaddress.cache.negative.ttl": "0",
}


def _first[T](*values: T | None) -> T | None:
    """Return the first value that is not `None`."""
    for value in values:
        if value is not None:
            return value
    return None


class ConfigComposer:
    """Merge role group settings onto role settings and defaults.

    For every setting the role group value wins over the role value, which
    wins over the compiled-in default. Property overrides are merged key by
    key in the same order. Composition has no side effects and cannot fail.
    """

    def compose(
        self,
        cluster: str,
        group_name: str,
        group: RoleGroupSpec,
        role: ServerSpec,
        *,
        min_server_id: int = DEFAULT_MYID_OFFSET,
    ) -> RoleGroupConfig:
        """Build the merged configuration of a role group.

        Parameters
        ----------
        cluster
            Name of the cluster, used in the default affinity.
        group_name
            Name of the role group.
        group
            Role group settings.
        role
            Server role settings.
        min_server_id
            Identity offset to use if neither the role group nor the role
            sets one.

        Returns
        -------
        RoleGroupConfig
            Fully-populated configuration.
        """
        role_config = role.config or ServerConfigSpec()
        group_config = group.config or ServerConfigSpec()

        init_limit = _first(
            group_config.init_limit, role_config.init_limit, DEFAULT_INIT_LIMIT
        )
        sync_limit = _first(
            group_config.sync_limit, role_config.sync_limit, DEFAULT_SYNC_LIMIT
        )
        tick_time = _first(
            group_config.tick_time, role_config.tick_time, DEFAULT_TICK_TIME
        )
        defaults = {
            ZOO_CFG_FILE: {
                "initLimit": str(init_limit),
                "syncLimit": str(sync_limit),
                "tickTime": str(tick_time),
                "dataDir": DATA_DIR,
            },
            SECURITY_PROPERTIES_FILE: dict(_DEFAULT_SECURITY_PROPERTIES),
        }
        overrides = self._merge_overrides(
            defaults, role.config_overrides, group.config_overrides
        )

        return RoleGroupConfig(
            name=group_name,
            replicas=group.replicas,
            resources=self._merge_resources(
                group_config.resources, role_config.resources
            ),
            affinity=_first(
                group_config.affinity,
                role_config.affinity,
                self._default_affinity(cluster),
            ),
            graceful_shutdown_timeout=_first(
                group_config.graceful_shutdown_timeout,
                role_config.graceful_shutdown_timeout,
                DEFAULT_GRACEFUL_SHUTDOWN,
            ),
            myid_offset=_first(
                group_config.myid_offset,
                role_config.myid_offset,
                min_server_id,
            ),
            overrides=overrides,
        )

    def _default_affinity(self, cluster: str) -> dict[str, Any]:
        """Prefer spreading the servers of a cluster across nodes."""
        selector = {
            "matchLabels": {
                LABEL_NAME: cluster,
                LABEL_COMPONENT: SERVER_ROLE,
            }
        }
        term = {
            "weight": POD_ANTI_AFFINITY_WEIGHT,
            "podAffinityTerm": {
                "labelSelector": selector,
                "topologyKey": "kubernetes.io/hostname",
            },
        }
        return {
            "podAntiAffinity": {
                "preferredDuringSchedulingIgnoredDuringExecution": [term]
            }
        }

    def _merge_overrides(
        self,
        defaults: dict[str, dict[str, str]],
        *layers: dict[str, dict[str, str]] | None,
    ) -> dict[str, dict[str, str]]:
        """Merge property overrides by file, later layers winning per key."""
        merged = {name: dict(props) for name, props in defaults.items()}
        for layer in layers:
            for name, props in (layer or {}).items():
                merged.setdefault(name, {}).update(props)
        return merged

    def _merge_resources(
        self, group: ResourcesSpec | None, role: ResourcesSpec | None
    ) -> ResourceEnvelope:
        """Resolve each resource field independently.

        A role group that only sets a CPU limit still inherits the role's
        memory limit and storage settings.
        """
        group = group or ResourcesSpec()
        role = role or ResourcesSpec()
        return ResourceEnvelope(
            cpu_min=_first(
                group.cpu.min if group.cpu else None,
                role.cpu.min if role.cpu else None,
                _DEFAULT_CPU_MIN,
            ),
            cpu_max=_first(
                group.cpu.max if group.cpu else None,
                role.cpu.max if role.cpu else None,
                _DEFAULT_CPU_MAX,
            ),
            memory_limit=_first(
                group.memory.limit if group.memory else None,
                role.memory.limit if role.memory else None,
                _DEFAULT_MEMORY_LIMIT,
            ),
            storage_capacity=_first(
                group.storage.capacity if group.storage else None,
                role.storage.capacity if role.storage else None,
                _DEFAULT_STORAGE_CAPACITY,
            ),
            storage_class=_first(
                group.storage.storage_class if group.storage else None,
                role.storage.storage_class if role.storage else None,
            ),
        )
