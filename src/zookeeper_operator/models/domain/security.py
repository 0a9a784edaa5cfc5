"""Resolved transport security of a cluster."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants import (
    CLIENT_PORT,
    CLIENT_TLS_DIR,
    QUORUM_TLS_DIR,
    SECURE_CLIENT_PORT,
    SERVER_TLS_DIR,
)

__all__ = ["ResolvedSecurity"]

_KEYSTORE = "keystore.p12"
_TRUSTSTORE = "truststore.p12"


@dataclass(frozen=True)
class ResolvedSecurity:
    """Transport security decisions for one reconcile of a cluster.

    This is recomputed on every reconcile, since the authentication class it
    was resolved from may change independently of the cluster.
    """

    store_password: str
    """Password of the mounted keystores and truststores.

    Empty if the stores are not password protected, in which case no
    password properties are rendered.
    """

    quorum_secret_class: str | None = None
    """Secret class providing certificates for quorum communication."""

    server_secret_class: str | None = None
    """Secret class providing the server certificate for client traffic."""

    authentication_class: str | None = None
    """Name of the resolved TLS authentication class, if any."""

    client_cert_secret_class: str | None = None
    """Secret class providing trust material for client certificates."""

    @property
    def tls_enabled(self) -> bool:
        """Whether clients must connect with TLS."""
        return bool(self.server_secret_class or self.authentication_class)

    @property
    def client_port(self) -> int:
        """Port clients connect to.

        Every consumer of the client port must use this value so that the
        rendered configuration and the published connection strings agree.
        """
        return SECURE_CLIENT_PORT if self.tls_enabled else CLIENT_PORT

    @property
    def truststore_dir(self) -> str:
        """Directory holding the truststore used to verify clients."""
        if self.client_cert_secret_class:
            return CLIENT_TLS_DIR
        return SERVER_TLS_DIR

    def rendered_properties(self) -> dict[str, str]:
        """Properties to inject into ``zoo.cfg``.

        Returns
        -------
        dict of str
            Quorum, client, and authentication TLS properties.
        """
        properties: dict[str, str] = {}
        if self.quorum_secret_class:
            properties.update(
                {
                    "sslQuorum": "true",
                    "ssl.quorum.hostnameVerification": "true",
                    "ssl.quorum.clientAuth": "need",
                    "serverCnxnFactory": (
                        "org.apache.zookeeper.server.NettyServerCnxnFactory"
                    ),
                    "authProvider.x509": (
                        "org.apache.zookeeper.server.auth"
                        ".X509AuthenticationProvider"
                    ),
                    "ssl.quorum.keyStore.location": (
                        f"{QUORUM_TLS_DIR}/{_KEYSTORE}"
                    ),
                    "ssl.quorum.trustStore.location": (
                        f"{QUORUM_TLS_DIR}/{_TRUSTSTORE}"
                    ),
                }
            )
            properties.update(self._store_passwords("ssl.quorum"))

        properties["clientPort"] = str(self.client_port)
        if not self.tls_enabled:
            return properties

        # Port unification lets the server accept both plaintext and TLS on
        # the secure port, since binding them separately conflicts.
        properties.update(
            {
                "client.portUnification": "true",
                "ssl.hostnameVerification": "true",
                "ssl.keyStore.location": f"{SERVER_TLS_DIR}/{_KEYSTORE}",
                "ssl.trustStore.location": (
                    f"{self.truststore_dir}/{_TRUSTSTORE}"
                ),
            }
        )
        properties.update(self._store_passwords("ssl"))
        if self.authentication_class:
            properties["ssl.clientAuth"] = "need"
        return properties

    def _store_passwords(self, prefix: str) -> dict[str, str]:
        if not self.store_password:
            return {}
        return {
            f"{prefix}.keyStore.password": self.store_password,
            f"{prefix}.trustStore.password": self.store_password,
        }
