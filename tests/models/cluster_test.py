"""Tests for parsing of the custom resources."""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from zookeeper_operator.models.v1alpha1.authentication import (
    AuthenticationClass,
)
from zookeeper_operator.models.v1alpha1.cluster import (
    ListenerClass,
    ZookeeperClusterSpec,
    ZookeeperClusterStatus,
)
from zookeeper_operator.models.v1alpha1.znode import (
    ZookeeperZnodeSpec,
    ZookeeperZnodeStatus,
)

from ..support.data import read_input_json


def test_cluster_defaults() -> None:
    body = read_input_json("standard", "cluster.json")
    spec = ZookeeperClusterSpec.model_validate(body["spec"])

    cluster_config = spec.cluster_config
    assert cluster_config.listener_class == ListenerClass.CLUSTER_INTERNAL
    assert cluster_config.min_server_id == 1
    assert cluster_config.authentication == []
    assert cluster_config.tls
    assert cluster_config.tls.quorum_secret_class == "tls"
    assert cluster_config.tls.server_secret_class == "tls"

    assert list(spec.servers.role_groups) == ["default"]
    group = spec.servers.role_groups["default"]
    assert group.replicas == 3
    assert group.config is None
    assert group.config_overrides is None


def test_cluster_full() -> None:
    spec = ZookeeperClusterSpec.model_validate(
        {
            "clusterConfig": {
                "listenerClass": "external-unstable",
                "minServerId": 5,
                "authentication": [{"authenticationClass": "zk-tls"}],
                "tls": {
                    "quorumSecretClass": "quorum",
                    "serverSecretClass": None,
                },
            },
            "servers": {
                "config": {
                    "resources": {
                        "cpu": {"min": "250m", "max": "1"},
                        "memory": {"limit": "2Gi"},
                        "storage": {
                            "capacity": "10Gi",
                            "storageClass": "fast",
                        },
                    },
                    "gracefulShutdownTimeout": "5m",
                    "tickTime": 2000,
                },
                "configOverrides": {"zoo.cfg": {"maxClientCnxns": "100"}},
                "roleGroups": {
                    "primary": {"replicas": 3, "config": {"myidOffset": 10}},
                    "secondary": {},
                },
            },
            "unknownField": True,
        }
    )
    cluster_config = spec.cluster_config
    assert cluster_config.listener_class == ListenerClass.EXTERNAL_UNSTABLE
    assert cluster_config.min_server_id == 5
    assert cluster_config.authentication[0].authentication_class == "zk-tls"
    assert cluster_config.tls
    assert cluster_config.tls.quorum_secret_class == "quorum"
    assert cluster_config.tls.server_secret_class is None

    role_config = spec.servers.config
    assert role_config
    assert role_config.graceful_shutdown_timeout == timedelta(minutes=5)
    assert role_config.tick_time == 2000
    assert role_config.resources
    assert role_config.resources.storage
    assert role_config.resources.storage.storage_class == "fast"
    assert spec.servers.config_overrides == {
        "zoo.cfg": {"maxClientCnxns": "100"}
    }
    primary = spec.servers.role_groups["primary"]
    assert primary.config
    assert primary.config.myid_offset == 10
    assert spec.servers.role_groups["secondary"].replicas == 1


def test_cluster_invalid() -> None:
    with pytest.raises(ValidationError):
        ZookeeperClusterSpec.model_validate({})
    with pytest.raises(ValidationError):
        ZookeeperClusterSpec.model_validate(
            {"servers": {"roleGroups": {"default": {"replicas": 0}}}}
        )
    with pytest.raises(ValidationError):
        ZookeeperClusterSpec.model_validate(
            {
                "clusterConfig": {"listenerClass": "external-stable"},
                "servers": {},
            }
        )


def test_cluster_status() -> None:
    status = ZookeeperClusterStatus(client_connections={"default": "a:2181"})
    assert status.model_dump(mode="json", by_alias=True) == {
        "clientConnections": {"default": "a:2181"}
    }
    assert ZookeeperClusterStatus.model_validate({}).client_connections == {}


def test_znode() -> None:
    body = read_input_json("standard", "znode.json")
    spec = ZookeeperZnodeSpec.model_validate(body["spec"])
    assert spec.cluster_ref.name == "zk"
    assert spec.cluster_ref.namespace is None

    status = ZookeeperZnodeStatus.model_validate({"znodePath": "/znode-1"})
    assert status.znode_path == "/znode-1"
    assert status.model_dump(mode="json", by_alias=True) == {
        "znodePath": "/znode-1"
    }

    with pytest.raises(ValidationError):
        ZookeeperZnodeSpec.model_validate({"clusterRef": {}})


def test_authentication_class() -> None:
    obj = read_input_json("standard", "authentication-class.json")
    auth = AuthenticationClass.from_object(obj)
    assert auth.name == "zk-client-tls"
    assert auth.spec.provider
    assert auth.spec.provider.name == "tls"
    assert auth.spec.provider.tls
    assert auth.spec.provider.tls.client_cert_secret_class == "zk-client-ca"

    obj = {"metadata": {"name": "ldap"}, "spec": {"provider": {"ldap": {}}}}
    auth = AuthenticationClass.from_object(obj)
    assert auth.spec.provider
    assert auth.spec.provider.name == "ldap"

    auth = AuthenticationClass.from_object({"metadata": {"name": "empty"}})
    assert auth.spec.provider is None
