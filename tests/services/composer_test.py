"""Tests for merging of role and role group configuration."""

from __future__ import annotations

from datetime import timedelta

from zookeeper_operator.models.domain.config import ResourceEnvelope
from zookeeper_operator.models.v1alpha1.cluster import (
    RoleGroupSpec,
    ServerSpec,
)
from zookeeper_operator.services.composer import ConfigComposer


def test_defaults() -> None:
    group = RoleGroupSpec(replicas=3)
    config = ConfigComposer().compose("zk", "default", group, ServerSpec())

    assert config.name == "default"
    assert config.replicas == 3
    assert config.resources == ResourceEnvelope(
        cpu_min="100m",
        cpu_max="200m",
        memory_limit="1Gi",
        storage_capacity="1Gi",
    )
    assert config.graceful_shutdown_timeout == timedelta(seconds=120)
    assert config.myid_offset == 1
    assert config.affinity == {
        "podAntiAffinity": {
            "preferredDuringSchedulingIgnoredDuringExecution": [
                {
                    "weight": 70,
                    "podAffinityTerm": {
                        "labelSelector": {
                            "matchLabels": {
                                "app.kubernetes.io/name": "zk",
                                "app.kubernetes.io/component": "server",
                            }
                        },
                        "topologyKey": "kubernetes.io/hostname",
                    },
                }
            ]
        }
    }
    assert config.zoo_cfg == {
        "initLimit": "5",
        "syncLimit": "2",
        "tickTime": "3000",
        "dataDir": "/kubedoop/data",
    }
    assert config.security_properties == {
        "networkaddress.cache.ttl": "5",
        "networkaddress.cache.negative.ttl": "0",
    }


def test_resources() -> None:
    role = ServerSpec.model_validate(
        {
            "config": {
                "resources": {
                    "cpu": {"min": "250m", "max": "500m"},
                    "memory": {"limit": "2Gi"},
                    "storage": {"storageClass": "fast"},
                }
            }
        }
    )
    group = RoleGroupSpec.model_validate(
        {
            "replicas": 1,
            "config": {
                "resources": {
                    "cpu": {"max": "1"},
                    "storage": {"capacity": "10Gi"},
                }
            },
        }
    )
    config = ConfigComposer().compose("zk", "default", group, role)
    assert config.resources == ResourceEnvelope(
        cpu_min="250m",
        cpu_max="1",
        memory_limit="2Gi",
        storage_capacity="10Gi",
        storage_class="fast",
    )


def test_precedence() -> None:
    role = ServerSpec.model_validate(
        {
            "config": {
                "gracefulShutdownTimeout": "5m",
                "myidOffset": 5,
                "tickTime": 2000,
                "initLimit": 10,
                "affinity": {"nodeAffinity": {"role": True}},
            }
        }
    )
    group = RoleGroupSpec.model_validate(
        {
            "config": {
                "myidOffset": 10,
                "initLimit": 20,
                "affinity": {"nodeAffinity": {"group": True}},
            }
        }
    )
    composer = ConfigComposer()
    config = composer.compose("zk", "a", group, role, min_server_id=3)
    assert config.myid_offset == 10
    assert config.graceful_shutdown_timeout == timedelta(minutes=5)
    assert config.affinity == {"nodeAffinity": {"group": True}}
    assert config.zoo_cfg["initLimit"] == "20"
    assert config.zoo_cfg["tickTime"] == "2000"
    assert config.zoo_cfg["syncLimit"] == "2"

    config = composer.compose("zk", "b", RoleGroupSpec(), role)
    assert config.myid_offset == 5
    assert config.affinity == {"nodeAffinity": {"role": True}}

    config = composer.compose(
        "zk", "c", RoleGroupSpec(), ServerSpec(), min_server_id=3
    )
    assert config.myid_offset == 3


def test_overrides() -> None:
    role = ServerSpec.model_validate(
        {
            "configOverrides": {
                "zoo.cfg": {
                    "maxClientCnxns": "60",
                    "autopurge.purgeInterval": "1",
                },
            }
        }
    )
    group = RoleGroupSpec.model_validate(
        {
            "config": {"syncLimit": 4},
            "configOverrides": {
                "zoo.cfg": {"maxClientCnxns": "100", "syncLimit": "8"},
                "security.properties": {"networkaddress.cache.ttl": "30"},
            },
        }
    )
    config = ConfigComposer().compose("zk", "default", group, role)
    assert config.zoo_cfg == {
        "initLimit": "5",
        "syncLimit": "8",
        "tickTime": "3000",
        "dataDir": "/kubedoop/data",
        "maxClientCnxns": "100",
        "autopurge.purgeInterval": "1",
    }
    assert config.security_properties == {
        "networkaddress.cache.ttl": "30",
        "networkaddress.cache.negative.ttl": "0",
    }

    # The inputs are not modified.
    assert role.config_overrides == {
        "zoo.cfg": {"maxClientCnxns": "60", "autopurge.purgeInterval": "1"}
    }
