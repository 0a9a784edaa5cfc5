"""Members of a ZooKeeper ensemble."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants import ELECTION_PORT, LEADER_PORT

__all__ = ["EnsembleMember"]


@dataclass(frozen=True)
class EnsembleMember:
    """One server of a role group, as seen by its peers."""

    ordinal: int
    """Pod ordinal within the role group's StatefulSet."""

    myid: int
    """Server identity, the ordinal plus the role group's offset."""

    host: str
    """Fully-qualified DNS name of the server pod."""

    leader_port: int = LEADER_PORT
    """Port used by followers to connect to the leader."""

    election_port: int = ELECTION_PORT
    """Port used for leader election."""

    def directive(self, client_port: int) -> tuple[str, str]:
        """Membership directive for ``zoo.cfg``.

        Parameters
        ----------
        client_port
            Port clients connect to.

        Returns
        -------
        tuple of str
            Key and value of the ``server.<myid>`` property.
        """
        address = f"{self.host}:{self.leader_port}:{self.election_port}"
        return f"server.{self.myid}", f"{address};{client_port}"
