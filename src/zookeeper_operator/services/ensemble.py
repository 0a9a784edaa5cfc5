"""Rendering of the configuration files of a role group."""

from __future__ import annotations

from ..constants import (
    ADMIN_PORT,
    CONFIG_DIR,
    HEAP_LIMIT_RATIO,
    JAVA_ENV_FILE,
    LOGBACK_FILE,
    METRICS_PROVIDER_PORT,
    SECURITY_PROPERTIES_FILE,
    ZOO_CFG_FILE,
)
from ..models.domain.config import RoleGroupConfig
from ..models.domain.ensemble import EnsembleMember
from ..models.domain.security import ResolvedSecurity
from ..units import memory_to_mebibytes
from ..util import role_group_name, service_fqdn, to_properties

__all__ = ["EnsembleConfigRenderer"]

_BASE_ZOO_CFG = {
    "admin.serverPort": str(ADMIN_PORT),
    "4lw.commands.whitelist": "srvr, mntr, conf, ruok",
    "metricsProvider.className": (
        "org.apache.zookeeper.metrics.prometheus.PrometheusMetricsProvider"
    ),
    "metricsProvider.httpPort": str(METRICS_PROVIDER_PORT),
}


class EnsembleConfigRenderer:
    """Render ``zoo.cfg``, ``security.properties``, and ``java.env``.

    Rendering is deterministic: properties are serialized sorted by key, so
    the same logical configuration always produces byte-identical files.

    Parameters
    ----------
    cluster_domain
        Kubernetes cluster domain used in member host names.
    """

    def __init__(self, cluster_domain: str) -> None:
        self._cluster_domain = cluster_domain

    def members(
        self, cluster: str, namespace: str, config: RoleGroupConfig
    ) -> list[EnsembleMember]:
        """List the members of a role group.

        Parameters
        ----------
        cluster
            Name of the cluster.
        namespace
            Namespace of the cluster.
        config
            Merged role group configuration.

        Returns
        -------
        list of EnsembleMember
            One member per replica, in ordinal order. Identities start at
            the role group's identity offset.
        """
        name = role_group_name(cluster, config.name)
        return [
            EnsembleMember(
                ordinal=i,
                myid=i + config.myid_offset,
                host=service_fqdn(
                    f"{name}-{i}.{name}", namespace, self._cluster_domain
                ),
            )
            for i in range(config.replicas)
        ]

    def render(
        self,
        cluster: str,
        namespace: str,
        config: RoleGroupConfig,
        security: ResolvedSecurity,
    ) -> dict[str, str]:
        """Render all configuration files of a role group.

        Parameters
        ----------
        cluster
            Name of the cluster.
        namespace
            Namespace of the cluster.
        config
            Merged role group configuration.
        security
            Resolved security of the cluster.

        Returns
        -------
        dict of str
            Mapping of file name to file contents.
        """
        members = self.members(cluster, namespace, config)
        zoo_cfg = self.render_zoo_cfg(members, security, config.zoo_cfg)
        return {
            ZOO_CFG_FILE: zoo_cfg,
            SECURITY_PROPERTIES_FILE: to_properties(
                config.security_properties
            ),
            JAVA_ENV_FILE: self.render_java_env(config),
        }

    def render_zoo_cfg(
        self,
        members: list[EnsembleMember],
        security: ResolvedSecurity,
        overrides: dict[str, str],
    ) -> str:
        """Render ``zoo.cfg``.

        Base defaults are applied first, then membership directives, then
        security properties, and finally overrides, so overrides always win.
        A single member runs in standalone mode and gets no membership
        directives.

        Parameters
        ----------
        members
            Members of the role group.
        security
            Resolved security of the cluster.
        overrides
            Merged property overrides for ``zoo.cfg``.

        Returns
        -------
        str
            Contents of ``zoo.cfg``.
        """
        properties = dict(_BASE_ZOO_CFG)
        if len(members) > 1:
            for member in members:
                key, value = member.directive(security.client_port)
                properties[key] = value
        properties.update(security.rendered_properties())
        properties.update(overrides)
        return to_properties(properties)

    def render_java_env(self, config: RoleGroupConfig) -> str:
        """Render ``java.env``, sourced by the server start script."""
        flags = [
            f"-Djava.security.properties={CONFIG_DIR}/"
            f"{SECURITY_PROPERTIES_FILE}",
            f"-Dlogback.configurationFile={CONFIG_DIR}/{LOGBACK_FILE}",
        ]
        env = {"SERVER_JVMFLAGS": " ".join(flags)}
        if config.resources.memory_limit:
            limit = memory_to_mebibytes(config.resources.memory_limit)
            env["ZK_SERVER_HEAP"] = str(int(limit * HEAP_LIMIT_RATIO))
        return "".join(f'export {k}="{env[k]}"\n' for k in sorted(env))
