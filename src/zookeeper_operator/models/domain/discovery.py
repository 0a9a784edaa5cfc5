"""Connection descriptors published for ensemble clients."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "ConnectionDescriptor",
    "ExposureMode",
]


class ExposureMode(Enum):
    """How clients reach the ensemble.

    The two modes have different failure behavior. In-cluster addresses are
    synthesized from declared configuration and cannot fail, while external
    addresses depend on Service and EndpointSlice objects that may not exist
    yet.
    """

    IN_CLUSTER = "in-cluster"
    EXTERNALLY_EXPOSED = "externally-exposed"

    def config_map_name(self, owner: str) -> str:
        """Name of the ConfigMap publishing the descriptor for this mode.

        Parameters
        ----------
        owner
            Name of the object publishing the descriptor.
        """
        if self == ExposureMode.EXTERNALLY_EXPOSED:
            return f"{owner}-nodeport"
        return owner


@dataclass(frozen=True)
class ConnectionDescriptor:
    """How a client reaches the ensemble and which subtree it is scoped to."""

    mode: ExposureMode
    """Exposure mode the hosts were resolved for."""

    hosts: list[str]
    """Ordered ``host:port`` entries."""

    port: int
    """Port used in the host entries."""

    chroot: str
    """Absolute namespace path prefix, always starting with ``/``."""

    @property
    def hosts_string(self) -> str:
        """Comma-joined host entries without the chroot."""
        return ",".join(self.hosts)

    @property
    def connection_string(self) -> str:
        """Full connection string, in the form ``h1:p1,h2:p2/chroot``."""
        return self.hosts_string + self.chroot

    def to_data(self) -> dict[str, str]:
        """Contents of the published ConfigMap.

        Returns
        -------
        dict of str
            Exactly the ``HOST``, ``CHROOT``, ``CLIENT_PORT``, and ``HOSTS``
            keys.
        """
        return {
            "HOST": self.connection_string,
            "CHROOT": self.chroot,
            "CLIENT_PORT": str(self.port),
            "HOSTS": self.hosts_string,
        }
