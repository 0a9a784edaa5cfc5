"""Exceptions for the ZooKeeper operator."""

from __future__ import annotations

from typing import Self, override

from kubernetes_asyncio.client import ApiException
from pydantic import ValidationError as PydanticValidationError
from safir.slack.blockkit import (
    SlackCodeBlock,
    SlackException,
    SlackMessage,
    SlackTextBlock,
    SlackTextField,
)
from safir.slack.sentry import SentryEventInfo

__all__ = [
    "KubernetesError",
    "MissingObjectError",
    "ValidationError",
    "ZooKeeperError",
]


class ValidationError(SlackException):
    """The content of a custom resource is invalid.

    These errors are not retried, since reconciling the same object again
    will fail the same way until a user changes it.

    Parameters
    ----------
    message
        Summary of error.
    kind
        Kind of object that failed validation.
    namespace
        Namespace of object, if it is namespaced.
    name
        Name of object.
    """

    @classmethod
    def from_exception(
        cls,
        exc: PydanticValidationError,
        *,
        kind: str,
        namespace: str | None = None,
        name: str | None = None,
    ) -> Self:
        """Create an exception from a Pydantic parse failure.

        Parameters
        ----------
        exc
            Pydantic exception.
        kind
            Kind of object that failed to parse.
        namespace
            Namespace of object.
        name
            Name of object.

        Returns
        -------
        ValidationError
            Constructed exception.
        """
        error = f"{type(exc).__name__}: {exc!s}"
        msg = f"Unable to parse {kind}"
        return cls(msg, kind=kind, namespace=namespace, name=name, error=error)

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        namespace: str | None = None,
        name: str | None = None,
        error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.namespace = namespace
        self.name = name
        self.error = error

    @override
    def to_slack(self) -> SlackMessage:
        """Convert to a Slack message for Slack alerting.

        Returns
        -------
        safir.slack.blockkit.SlackMessage
            Slack message suitable for posting as an alert.
        """
        message = super().to_slack()
        if self.kind:
            obj = _format_object(self.kind, self.namespace, self.name)
            message.blocks.append(SlackTextBlock(heading="Object", text=obj))
        if self.error:
            block = SlackCodeBlock(heading="Error", code=self.error)
            message.blocks.append(block)
        return message


class KubernetesError(SlackException):
    """An API call to Kubernetes failed.

    Parameters
    ----------
    message
        Summary of error.
    namespace
        Namespace of object being acted on.
    name
        Name of object being acted on.
    kind
        Kind of object being acted on.
    status
        Status code of failure, if any.
    body
        Body of failure message, if any.
    """

    @classmethod
    def from_exception(
        cls,
        message: str,
        exc: ApiException,
        *,
        kind: str | None = None,
        namespace: str | None = None,
        name: str | None = None,
    ) -> Self:
        """Create an exception from a Kubernetes API exception.

        Parameters
        ----------
        message
            Brief explanation of what was being attempted.
        exc
            Kubernetes API exception.
        kind
            Kind of object being acted on.
        namespace
            Namespace of object being acted on.
        name
            Name of object being acted on.

        Returns
        -------
        KubernetesError
            Newly-created exception.
        """
        return cls(
            message,
            kind=kind,
            namespace=namespace,
            name=name,
            status=exc.status,
            body=exc.body if exc.body else exc.reason,
        )

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        namespace: str | None = None,
        name: str | None = None,
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.namespace = namespace
        self.name = name
        self.status = status
        self.body = body

    @override
    def __str__(self) -> str:
        result = self._summary()
        if self.body:
            result += f": {self.body}"
        return result

    @override
    def to_slack(self) -> SlackMessage:
        """Convert to a Slack message for Slack alerting.

        Returns
        -------
        safir.slack.blockkit.SlackMessage
            Slack message suitable for posting as an alert.
        """
        message = super().to_slack()
        message.message = self._summary()
        if self.status:
            field = SlackTextField(heading="Status", text=str(self.status))
            message.fields.append(field)
        if self.kind:
            obj = _format_object(self.kind, self.namespace, self.name)
            message.blocks.append(SlackTextBlock(heading="Object", text=obj))
        if self.body:
            code = SlackCodeBlock(heading="Error", code=self.body)
            message.blocks.append(code)
        return message

    @override
    def to_sentry(self) -> SentryEventInfo:
        """Return a collection of Sentry event metadata about the exception.

        Returns
        -------
        safir.slack.sentry.SentryEventInfo
            Sentry event metadata for use with \
            `~safir.sentry.before_send_handler`
        """
        info = super().to_sentry()
        if self.status:
            info.tags["status"] = str(self.status)
        if self.name:
            info.tags["name"] = self.name
        if self.kind:
            info.tags["kind"] = self.kind
        if self.namespace:
            info.tags["namespace"] = self.namespace
        if self.body:
            info.attachments["body"] = self.body
        return info

    def _summary(self) -> str:
        """Summarize the exception.

        Produces a single-line summary, used for the main part of the Slack
        message and part of the stringification.
        """
        result = self.message
        if self.name or self.kind or self.status:
            result += " ("
            if self.name:
                kind = f"{self.kind} " if self.kind else ""
                if self.namespace:
                    result += f"{kind}{self.namespace}/{self.name}"
                else:
                    result += f"{kind}{self.name}"
                if self.status:
                    result += ", "
            elif self.kind:
                result += self.kind
                if self.status:
                    result += ", "
            if self.status:
                result += f"status {self.status}"
            result += ")"
        return result


class MissingObjectError(SlackException):
    """An expected Kubernetes object is missing.

    The object is usually created by some other reconcile of the same
    cluster, so these errors are retried.

    Parameters
    ----------
    message
        Summary of error.
    kind
        Kind of Kubernetes object that is missing.
    namespace
        Namespace of object being acted on.
    name
        Name of object being acted on.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        namespace: str | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.namespace = namespace
        self.name = name

    @override
    def to_slack(self) -> SlackMessage:
        """Convert to a Slack message for Slack alerting.

        Returns
        -------
        safir.slack.blockkit.SlackMessage
            Slack message suitable for posting as an alert.
        """
        message = super().to_slack()
        obj = _format_object(self.kind, self.namespace, self.name)
        message.blocks.append(SlackTextBlock(heading="Object", text=obj))
        return message

    @override
    def to_sentry(self) -> SentryEventInfo:
        """Return a collection of Sentry event metadata about the exception.

        Returns
        -------
        safir.slack.sentry.SentryEventInfo
            Sentry event metadata for use with \
            `~safir.sentry.before_send_handler`
        """
        info = super().to_sentry()
        info.tags["kind"] = self.kind
        if self.name:
            info.tags["name"] = self.name
        if self.namespace:
            info.tags["namespace"] = self.namespace
        return info


class ZooKeeperError(SlackException):
    """An operation against a ZooKeeper ensemble failed.

    Parameters
    ----------
    message
        Summary of error.
    hosts
        Connection string of the ensemble.
    path
        Znode path being acted on, if any.
    error
        Underlying error, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        hosts: str,
        path: str | None = None,
        error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hosts = hosts
        self.path = path
        self.error = error

    @override
    def __str__(self) -> str:
        result = f"{self.message} ({self.hosts}"
        if self.path:
            result += f", path {self.path}"
        result += ")"
        if self.error:
            result += f": {self.error}"
        return result

    @override
    def to_slack(self) -> SlackMessage:
        """Convert to a Slack message for Slack alerting.

        Returns
        -------
        safir.slack.blockkit.SlackMessage
            Slack message suitable for posting as an alert.
        """
        message = super().to_slack()
        fields = [SlackTextField(heading="Ensemble", text=self.hosts)]
        if self.path:
            fields.append(SlackTextField(heading="Path", text=self.path))
        message.fields.extend(fields)
        if self.error:
            block = SlackCodeBlock(heading="Error", code=self.error)
            message.blocks.append(block)
        return message


def _format_object(kind: str, namespace: str | None, name: str | None) -> str:
    """Format an object reference for Slack messages."""
    if name:
        if namespace:
            return f"{kind} {namespace}/{name}"
        return f"{kind} {name}"
    if namespace:
        return f"{kind} (namespace: {namespace})"
    return kind
