"""Models for the cluster-scoped ``AuthenticationClass`` resource.

Only the parts of the resource the operator acts on are modeled. Providers
other than TLS are kept as opaque mappings, since their only use is to reject
them with a useful error message.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "AuthenticationClass",
    "AuthenticationClassSpec",
    "AuthenticationProvider",
    "TlsProvider",
]


class _AuthenticationModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )


class TlsProvider(_AuthenticationModel):
    """Clients authenticate with TLS client certificates."""

    client_cert_secret_class: str | None = Field(
        None,
        title="Secret class providing the client CA",
        description=(
            "If set, its trust material replaces the server trust store when"
            " validating client certificates"
        ),
    )


class AuthenticationProvider(_AuthenticationModel):
    """Authentication mechanism. At most one provider should be set."""

    tls: TlsProvider | None = None

    ldap: dict[str, Any] | None = None

    oidc: dict[str, Any] | None = None

    static: dict[str, Any] | None = None

    @property
    def name(self) -> str | None:
        """Name of the configured provider, if any."""
        for name in ("tls", "ldap", "oidc", "static"):
            if getattr(self, name) is not None:
                return name
        return None


class AuthenticationClassSpec(_AuthenticationModel):
    provider: AuthenticationProvider | None = None


class AuthenticationClass(_AuthenticationModel):
    """An ``AuthenticationClass`` object as returned by Kubernetes."""

    name: str

    spec: AuthenticationClassSpec = Field(
        default_factory=AuthenticationClassSpec
    )

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> AuthenticationClass:
        """Build from the raw custom object.

        Parameters
        ----------
        obj
            Custom object as returned by the Kubernetes API.

        Returns
        -------
        AuthenticationClass
            Parsed object.

        Raises
        ------
        pydantic.ValidationError
            Raised if the object cannot be parsed.
        """
        return cls.model_validate(
            {"name": obj["metadata"]["name"], "spec": obj.get("spec") or {}}
        )
