"""Tests for rendering of role group configuration files."""

from __future__ import annotations

from zookeeper_operator.models.domain.security import ResolvedSecurity
from zookeeper_operator.models.v1alpha1.cluster import (
    RoleGroupSpec,
    ServerSpec,
)
from zookeeper_operator.services.composer import ConfigComposer
from zookeeper_operator.services.ensemble import EnsembleConfigRenderer

from ..support.data import read_output_data

_SECURE = ResolvedSecurity(
    store_password="changeit",
    quorum_secret_class="tls",
    server_secret_class="tls",
)


def _properties(rendered: str) -> dict[str, str]:
    lines = rendered.splitlines()
    return dict(line.split("=", 1) for line in lines)


def test_render() -> None:
    group = RoleGroupSpec(replicas=3)
    config = ConfigComposer().compose("zk", "default", group, ServerSpec())
    renderer = EnsembleConfigRenderer("cluster.local")

    files = renderer.render("zk", "default", config, _SECURE)
    assert sorted(files) == ["java.env", "security.properties", "zoo.cfg"]
    assert files["zoo.cfg"] == read_output_data("standard", "zoo.cfg")
    assert files["security.properties"] == read_output_data(
        "standard", "security.properties"
    )
    assert files["java.env"] == read_output_data("standard", "java.env")

    # Rendering is deterministic.
    assert renderer.render("zk", "default", config, _SECURE) == files


def test_members() -> None:
    group = RoleGroupSpec.model_validate(
        {"replicas": 2, "config": {"myidOffset": 10}}
    )
    config = ConfigComposer().compose("zk", "b", group, ServerSpec())
    renderer = EnsembleConfigRenderer("")

    members = renderer.members("zk", "kafka", config)
    assert [(m.ordinal, m.myid) for m in members] == [(0, 10), (1, 11)]
    assert members[1].host == "zk-server-b-1.zk-server-b.kafka.svc"

    zoo_cfg = _properties(renderer.render_zoo_cfg(members, _SECURE, {}))
    assert zoo_cfg["server.10"] == (
        "zk-server-b-0.zk-server-b.kafka.svc:2888:3888;2282"
    )
    assert zoo_cfg["server.11"] == (
        "zk-server-b-1.zk-server-b.kafka.svc:2888:3888;2282"
    )


def test_standalone() -> None:
    config = ConfigComposer().compose(
        "zk", "default", RoleGroupSpec(), ServerSpec()
    )
    renderer = EnsembleConfigRenderer("cluster.local")
    members = renderer.members("zk", "default", config)
    assert len(members) == 1

    zoo_cfg = _properties(renderer.render_zoo_cfg(members, _SECURE, {}))
    assert not [k for k in zoo_cfg if k.startswith("server.")]
    assert zoo_cfg["clientPort"] == "2282"


def test_plaintext() -> None:
    config = ConfigComposer().compose(
        "zk", "default", RoleGroupSpec(replicas=2), ServerSpec()
    )
    renderer = EnsembleConfigRenderer("cluster.local")
    security = ResolvedSecurity(store_password="changeit")

    files = renderer.render("zk", "default", config, security)
    zoo_cfg = _properties(files["zoo.cfg"])
    assert zoo_cfg["clientPort"] == "2181"
    assert zoo_cfg["server.1"].endswith(":2888:3888;2181")
    assert not [k for k in zoo_cfg if k.startswith("ssl")]
    assert "client.portUnification" not in zoo_cfg
    assert "serverCnxnFactory" not in zoo_cfg


def test_overrides_win() -> None:
    group = RoleGroupSpec.model_validate(
        {
            "replicas": 3,
            "configOverrides": {
                "zoo.cfg": {
                    "ssl.hostnameVerification": "false",
                    "admin.serverPort": "9090",
                    "maxClientCnxns": "100",
                }
            },
        }
    )
    config = ConfigComposer().compose("zk", "default", group, ServerSpec())
    renderer = EnsembleConfigRenderer("cluster.local")

    files = renderer.render("zk", "default", config, _SECURE)
    zoo_cfg = _properties(files["zoo.cfg"])
    assert zoo_cfg["ssl.hostnameVerification"] == "false"
    assert zoo_cfg["admin.serverPort"] == "9090"
    assert zoo_cfg["maxClientCnxns"] == "100"
    assert zoo_cfg["sslQuorum"] == "true"


def test_java_env_heap() -> None:
    role = ServerSpec.model_validate(
        {"config": {"resources": {"memory": {"limit": "4Gi"}}}}
    )
    config = ConfigComposer().compose("zk", "default", RoleGroupSpec(), role)
    java_env = EnsembleConfigRenderer("cluster.local").render_java_env(config)
    assert 'export ZK_SERVER_HEAP="3276"\n' in java_env
