"""Tests for operator configuration parsing."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError
from safir.logging import LogLevel, Profile

from zookeeper_operator.config import Config, ZooKeeperClientConfig
from zookeeper_operator.constants import (
    KUBERNETES_REQUEST_TIMEOUT,
    ZOOKEEPER_CONNECT_TIMEOUT,
)
from zookeeper_operator.dependencies.config import ConfigDependency


def test_config(config: Config) -> None:
    assert config.log_level == LogLevel.DEBUG
    assert config.profile == Profile.development
    assert config.name == "zookeeper-operator"
    assert config.cluster_domain == "cluster.local"
    assert config.retry_delay == timedelta(seconds=1)
    assert config.kubernetes_timeout == timedelta(seconds=10)
    assert config.zookeeper.connect_timeout == timedelta(seconds=5)
    assert config.zookeeper.store_password.get_secret_value() == "changeit"
    assert not config.zookeeper.use_ssl
    assert config.slack_webhook is None


def test_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("")
    config = Config.from_file(config_path)
    assert config.log_level == LogLevel.INFO
    assert config.profile == Profile.production
    assert config.kubernetes_timeout == KUBERNETES_REQUEST_TIMEOUT
    assert config.zookeeper.connect_timeout == ZOOKEEPER_CONNECT_TIMEOUT


def test_unknown_setting(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("clusterDomian: example.org\n")
    with pytest.raises(ValidationError):
        Config.from_file(config_path)


def test_dependency(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("clusterDomain: example.org\n")
    dependency = ConfigDependency(config_path)
    config = dependency.config
    assert config.cluster_domain == "example.org"
    assert dependency.config is config

    config_path.write_text("clusterDomain: ''\n")
    dependency.set_path(config_path)
    assert dependency.config.cluster_domain == ""


def test_client_tls() -> None:
    config = ZooKeeperClientConfig.model_validate(
        {
            "caPath": "/etc/zookeeper/ca.crt",
            "certPath": "/etc/zookeeper/tls.crt",
            "keyPath": "/etc/zookeeper/tls.key",
        }
    )
    assert config.use_ssl
    assert config.ca_path == Path("/etc/zookeeper/ca.crt")

    config = ZooKeeperClientConfig.model_validate(
        {"caPath": "/etc/zookeeper/ca.crt"}
    )
    assert config.use_ssl
    assert config.cert_path is None

    with pytest.raises(ValidationError, match="set together"):
        ZooKeeperClientConfig.model_validate(
            {
                "caPath": "/etc/zookeeper/ca.crt",
                "certPath": "/etc/zookeeper/tls.crt",
            }
        )
    with pytest.raises(ValidationError, match="requires caPath"):
        ZooKeeperClientConfig.model_validate(
            {
                "certPath": "/etc/zookeeper/tls.crt",
                "keyPath": "/etc/zookeeper/tls.key",
            }
        )
