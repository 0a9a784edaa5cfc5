"""Global configuration parsing."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Annotated, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict
from safir.logging import LogLevel, Profile
from safir.pydantic import HumanTimedelta

from .constants import KUBERNETES_REQUEST_TIMEOUT, ZOOKEEPER_CONNECT_TIMEOUT

__all__ = [
    "Config",
    "ZooKeeperClientConfig",
]


class ZooKeeperClientConfig(BaseModel):
    """How the operator itself talks to managed ensembles."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    connect_timeout: Annotated[
        HumanTimedelta,
        Field(
            title="Connect timeout",
            description=(
                "Bound on establishing a session with an ensemble and on each"
                " individual request made over it"
            ),
        ),
    ] = ZOOKEEPER_CONNECT_TIMEOUT

    store_password: Annotated[
        SecretStr,
        Field(
            title="Keystore and truststore password",
            description=(
                "Password of the PKCS#12 stores mounted into the servers,"
                " written into the rendered ensemble configuration"
            ),
        ),
    ] = SecretStr("changeit")

    ca_path: Annotated[
        Path | None,
        Field(
            title="CA certificate",
            description=(
                "CA used to verify ensembles that require transport security."
                " If not set, the operator connects without TLS."
            ),
        ),
    ] = None

    cert_path: Annotated[
        Path | None,
        Field(title="Client certificate presented to ensembles"),
    ] = None

    key_path: Annotated[
        Path | None,
        Field(title="Private key of the client certificate"),
    ] = None

    @model_validator(mode="after")
    def _validate_client_certificate(self) -> Self:
        if (self.cert_path is None) != (self.key_path is None):
            msg = "certPath and keyPath must be set together"
            raise ValueError(msg)
        if self.cert_path and not self.ca_path:
            msg = "certPath requires caPath"
            raise ValueError(msg)
        return self

    @property
    def use_ssl(self) -> bool:
        """Whether to connect to ensembles with TLS."""
        return self.ca_path is not None


class Config(BaseSettings):
    """ZooKeeper operator configuration."""

    model_config = SettingsConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    log_level: Annotated[
        LogLevel,
        Field(
            title="Log level",
            description="Python logging level",
            examples=[LogLevel.INFO],
        ),
    ] = LogLevel.INFO

    name: Annotated[
        str,
        Field(
            title="Name of application",
            description="Used when reporting problems to Slack",
        ),
    ] = "zookeeper-operator"

    profile: Annotated[
        Profile,
        Field(
            title="Application logging profile",
            description=(
                "``production`` uses JSON logging. ``development`` uses"
                " logging that may be easier for humans to read but that"
                " cannot be easily parsed by computers."
            ),
            examples=[Profile.development],
        ),
    ] = Profile.production

    slack_webhook: Annotated[
        SecretStr | None,
        Field(
            title="Slack webhook for alerts",
            description=(
                "If set, invalid custom resources and other failures that"
                " will not be retried are reported to Slack via this webhook"
            ),
            validation_alias="ZOOKEEPER_OPERATOR_SLACK_WEBHOOK",
        ),
    ] = None

    cluster_domain: Annotated[
        str,
        Field(
            title="Kubernetes cluster domain",
            description=(
                "Appended to in-cluster host names. If empty, names end in"
                " ``.svc`` and rely on the resolver search path."
            ),
        ),
    ] = "cluster.local"

    zookeeper: Annotated[
        ZooKeeperClientConfig,
        Field(title="Ensemble client configuration"),
    ] = ZooKeeperClientConfig()

    retry_delay: Annotated[
        HumanTimedelta,
        Field(
            title="Retry delay",
            description=(
                "How long to wait before reconciling an object again after"
                " a failure that may resolve itself"
            ),
        ),
    ] = timedelta(seconds=10)

    kubernetes_timeout: Annotated[
        HumanTimedelta,
        Field(
            title="Kubernetes timeout",
            description=(
                "Overall bound on the Kubernetes API calls made by a single"
                " reconcile"
            ),
        ),
    ] = KUBERNETES_REQUEST_TIMEOUT

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load the operator configuration from a YAML file.

        Parameters
        ----------
        path
            Path to the configuration file.
        """
        with path.open("r") as f:
            return cls.model_validate(yaml.safe_load(f) or {})
