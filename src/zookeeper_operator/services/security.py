"""Resolution of the transport security of a cluster."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from structlog.stdlib import BoundLogger

from ..exceptions import MissingObjectError, ValidationError
from ..models.domain.security import ResolvedSecurity
from ..models.v1alpha1.authentication import AuthenticationClass
from ..models.v1alpha1.cluster import ClusterConfigSpec
from ..storage.kubernetes.custom import AuthenticationClassStorage
from ..timeout import Timeout

__all__ = ["SecurityResolver"]


class SecurityResolver:
    """Decide how clients and peers of an ensemble are secured.

    Parameters
    ----------
    storage
        Storage for authentication classes.
    store_password
        Password of the keystores and truststores mounted into the servers.
    logger
        Logger to use.
    """

    def __init__(
        self,
        storage: AuthenticationClassStorage,
        store_password: str,
        logger: BoundLogger,
    ) -> None:
        self._storage = storage
        self._store_password = store_password
        self._logger = logger

    async def resolve(
        self, cluster_config: ClusterConfigSpec, timeout: Timeout
    ) -> ResolvedSecurity:
        """Resolve the security settings of a cluster.

        Parameters
        ----------
        cluster_config
            Cluster-wide configuration of the cluster.
        timeout
            Timeout on Kubernetes operations.

        Returns
        -------
        ResolvedSecurity
            Security decisions, including the effective client port.

        Raises
        ------
        KubernetesError
            Raised if the authentication class could not be read.
        MissingObjectError
            Raised if the referenced authentication class does not exist.
        ValidationError
            Raised if more than one authentication class is referenced or if
            the referenced class does not use TLS client certificates.
        """
        references = cluster_config.authentication
        if len(references) > 1:
            names = ", ".join(r.authentication_class for r in references)
            msg = f"Only one authentication class is supported, got {names}"
            raise ValidationError(msg)

        authentication_class = None
        client_cert_secret_class = None
        if references:
            name = references[0].authentication_class
            auth = await self._get_authentication_class(name, timeout)
            provider = auth.spec.provider
            if provider is None or provider.name is None:
                msg = f"AuthenticationClass {name} has no provider"
                raise ValidationError(
                    msg, kind="AuthenticationClass", name=name
                )
            if provider.tls is None:
                msg = (
                    f"AuthenticationClass {name} uses unsupported provider"
                    f" {provider.name}, only tls is supported"
                )
                raise ValidationError(
                    msg, kind="AuthenticationClass", name=name
                )
            authentication_class = name
            client_cert_secret_class = provider.tls.client_cert_secret_class

        tls = cluster_config.tls
        security = ResolvedSecurity(
            store_password=self._store_password,
            quorum_secret_class=tls.quorum_secret_class if tls else None,
            server_secret_class=tls.server_secret_class if tls else None,
            authentication_class=authentication_class,
            client_cert_secret_class=client_cert_secret_class,
        )
        self._logger.debug(
            "Resolved cluster security",
            tls_enabled=security.tls_enabled,
            client_port=security.client_port,
            authentication_class=authentication_class,
        )
        return security

    async def _get_authentication_class(
        self, name: str, timeout: Timeout
    ) -> AuthenticationClass:
        obj = await self._storage.read(name, timeout)
        if obj is None:
            msg = f"AuthenticationClass {name} not found"
            raise MissingObjectError(
                msg, kind="AuthenticationClass", name=name
            )
        try:
            return AuthenticationClass.from_object(obj)
        except PydanticValidationError as e:
            raise ValidationError.from_exception(
                e, kind="AuthenticationClass", name=name
            ) from e
