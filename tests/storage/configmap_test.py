"""Tests for ConfigMap storage."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import pytest
import structlog
from kubernetes_asyncio import client
from kubernetes_asyncio.client import ApiException, V1ConfigMap, V1ObjectMeta

from zookeeper_operator.exceptions import KubernetesError
from zookeeper_operator.storage.kubernetes.creator import ConfigMapStorage
from zookeeper_operator.timeout import Timeout

from ..support.kubernetes import MockKubernetesApi, config_map_versions


def _config_map(data: dict[str, str], **labels: str) -> V1ConfigMap:
    return V1ConfigMap(
        metadata=V1ObjectMeta(name="zk", namespace="default", labels=labels),
        data=data,
    )


@pytest.mark.asyncio
async def test_apply(mock_kubernetes: MockKubernetesApi) -> None:
    logger = structlog.get_logger(__name__)
    storage = ConfigMapStorage(client.ApiClient(), logger)
    timeout = Timeout(timedelta(seconds=10))

    assert await storage.apply("default", _config_map({"a": "1"}), timeout)
    created = config_map_versions(mock_kubernetes)
    assert not await storage.apply(
        "default", _config_map({"a": "1"}), timeout
    )
    assert config_map_versions(mock_kubernetes) == created

    assert await storage.apply("default", _config_map({"a": "2"}), timeout)
    replaced = config_map_versions(mock_kubernetes)
    assert replaced != created
    assert await storage.apply(
        "default", _config_map({"a": "2"}, app="zk"), timeout
    )
    relabeled = config_map_versions(mock_kubernetes)
    assert relabeled != replaced
    assert not await storage.apply(
        "default", _config_map({"a": "2"}), timeout
    )
    assert config_map_versions(mock_kubernetes) == relabeled

    config_map = await mock_kubernetes.read_namespaced_config_map(
        "zk", "default"
    )
    assert config_map.data == {"a": "2"}
    assert config_map.metadata.labels == {"app": "zk"}


@pytest.mark.asyncio
async def test_errors(mock_kubernetes: MockKubernetesApi) -> None:
    logger = structlog.get_logger(__name__)
    storage = ConfigMapStorage(client.ApiClient(), logger)
    timeout = Timeout(timedelta(seconds=10))

    assert await storage.read("zk", "default", timeout) is None

    def callback(method: str, *args: Any) -> None:
        if method == "read_namespaced_config_map":
            raise ApiException(status=500, reason="Internal error")

    mock_kubernetes.error_callback = callback
    with pytest.raises(KubernetesError) as excinfo:
        await storage.apply("default", _config_map({"a": "1"}), timeout)
    assert excinfo.value.status == 500
    assert excinfo.value.kind == "ConfigMap"
    assert excinfo.value.namespace == "default"
    assert excinfo.value.name == "zk"
