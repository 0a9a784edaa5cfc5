"""Tests for operator exceptions."""

from __future__ import annotations

import pytest
from kubernetes_asyncio.client import ApiException
from pydantic import ValidationError as PydanticValidationError
from safir.slack.blockkit import SlackCodeBlock, SlackTextBlock

from zookeeper_operator.exceptions import (
    KubernetesError,
    MissingObjectError,
    ValidationError,
    ZooKeeperError,
)
from zookeeper_operator.models.v1alpha1.cluster import ZookeeperClusterSpec


def test_kubernetes_error() -> None:
    exc = ApiException(status=500, reason="Internal Server Error")
    error = KubernetesError.from_exception(
        "Error reading object",
        exc,
        kind="ConfigMap",
        namespace="default",
        name="zk",
    )
    assert str(error) == (
        "Error reading object (ConfigMap default/zk, status 500):"
        " Internal Server Error"
    )

    message = error.to_slack()
    assert message.message == (
        "Error reading object (ConfigMap default/zk, status 500)"
    )
    assert any(f.heading == "Status" for f in message.fields)

    info = error.to_sentry()
    assert info.tags["status"] == "500"
    assert info.tags["kind"] == "ConfigMap"

    error = KubernetesError("Error listing objects", kind="EndpointSlice")
    assert str(error) == "Error listing objects (EndpointSlice)"


def test_validation_error() -> None:
    with pytest.raises(PydanticValidationError) as excinfo:
        ZookeeperClusterSpec.model_validate({})
    error = ValidationError.from_exception(
        excinfo.value, kind="ZookeeperCluster", namespace="default", name="zk"
    )
    assert str(error) == "Unable to parse ZookeeperCluster"
    assert error.error
    assert "servers" in error.error

    message = error.to_slack()
    assert message.blocks[0] == SlackTextBlock(
        heading="Object", text="ZookeeperCluster default/zk"
    )
    assert isinstance(message.blocks[1], SlackCodeBlock)


def test_missing_object_error() -> None:
    error = MissingObjectError(
        "AuthenticationClass tls not found",
        kind="AuthenticationClass",
        name="tls",
    )
    message = error.to_slack()
    assert message.blocks == [
        SlackTextBlock(heading="Object", text="AuthenticationClass tls")
    ]
    assert error.to_sentry().tags["kind"] == "AuthenticationClass"


def test_zookeeper_error() -> None:
    error = ZooKeeperError(
        "Cannot create znode",
        hosts="zk.default.svc.cluster.local:2282",
        path="/znode-1234",
        error="ConnectionLoss: ",
    )
    assert str(error) == (
        "Cannot create znode (zk.default.svc.cluster.local:2282, path"
        " /znode-1234): ConnectionLoss: "
    )
    message = error.to_slack()
    headings = [f.heading for f in message.fields]
    assert "Ensemble" in headings
    assert "Path" in headings
