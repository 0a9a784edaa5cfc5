"""Global constants."""

from datetime import timedelta
from pathlib import Path

__all__ = [
    "ADMIN_PORT",
    "AUTHENTICATION_GROUP",
    "AUTHENTICATION_PLURAL",
    "AUTHENTICATION_VERSION",
    "CLIENT_PORT",
    "CLIENT_PORT_NAME",
    "CLIENT_TLS_DIR",
    "CLUSTER_PLURAL",
    "CLUSTER_RECONCILE_INTERVAL",
    "CONFIGURATION_PATH",
    "CONFIGURATION_PATH_ENV_VAR",
    "CONFIG_DIR",
    "DATA_DIR",
    "DEFAULT_GRACEFUL_SHUTDOWN",
    "DEFAULT_INIT_LIMIT",
    "DEFAULT_MYID_OFFSET",
    "DEFAULT_SYNC_LIMIT",
    "DEFAULT_TICK_TIME",
    "ELECTION_PORT",
    "GROUP",
    "HEAP_LIMIT_RATIO",
    "JAVA_ENV_FILE",
    "KUBERNETES_REQUEST_TIMEOUT",
    "LABEL_COMPONENT",
    "LABEL_MANAGED_BY",
    "LABEL_NAME",
    "LABEL_ROLE_GROUP",
    "LEADER_PORT",
    "LOGBACK_FILE",
    "MANAGED_BY",
    "METRICS_PROVIDER_PORT",
    "POD_ANTI_AFFINITY_WEIGHT",
    "QUORUM_TLS_DIR",
    "SECURE_CLIENT_PORT",
    "SECURITY_PROPERTIES_FILE",
    "SERVER_ROLE",
    "SERVER_TLS_DIR",
    "SERVICE_NAME_LABEL",
    "VERSION",
    "ZNODE_FINALIZER",
    "ZNODE_PLURAL",
    "ZOO_CFG_FILE",
    "ZOOKEEPER_CONNECT_TIMEOUT",
]

GROUP = "zookeeper.kubedoop.dev"
"""API group of the ``ZookeeperCluster`` and ``ZookeeperZnode`` resources."""

VERSION = "v1alpha1"
"""API version of the managed custom resources."""

CLUSTER_PLURAL = "zookeeperclusters"
"""Plural name of the ``ZookeeperCluster`` resource."""

ZNODE_PLURAL = "zookeeperznodes"
"""Plural name of the ``ZookeeperZnode`` resource."""

AUTHENTICATION_GROUP = "authentication.kubedoop.dev"
"""API group of the cluster-scoped ``AuthenticationClass`` resource."""

AUTHENTICATION_VERSION = "v1alpha1"
"""API version of the ``AuthenticationClass`` resource."""

AUTHENTICATION_PLURAL = "authenticationclasses"
"""Plural name of the ``AuthenticationClass`` resource."""

ZNODE_FINALIZER = "znode.kubedoop.dev/delete-znode"
"""Finalizer that blocks deletion of a znode request until cleanup is done."""

CONFIGURATION_PATH = Path("/etc/zookeeper-operator/config.yaml")
"""Default path to operator configuration."""

CONFIGURATION_PATH_ENV_VAR = "ZOOKEEPER_OPERATOR_CONFIG_PATH"
"""Environment variable that overrides the configuration path."""

CLUSTER_RECONCILE_INTERVAL = timedelta(minutes=1)
"""How frequently to reconcile clusters even when nothing changed.

This picks up changes to objects the operator does not watch, such as the
EndpointSlices backing an externally exposed cluster Service.
"""

KUBERNETES_REQUEST_TIMEOUT = timedelta(seconds=30)
"""Default bound on the Kubernetes API calls of a single reconcile."""

ZOOKEEPER_CONNECT_TIMEOUT = timedelta(seconds=10)
"""Default connect timeout when talking to a ZooKeeper ensemble."""

# Ports. The names match the port names on the Services created for a
# cluster.

CLIENT_PORT_NAME = "client"
CLIENT_PORT = 2181
SECURE_CLIENT_PORT = 2282
LEADER_PORT = 2888
ELECTION_PORT = 3888
METRICS_PROVIDER_PORT = 7000
ADMIN_PORT = 8080

# Rendered configuration files.

ZOO_CFG_FILE = "zoo.cfg"
SECURITY_PROPERTIES_FILE = "security.properties"
JAVA_ENV_FILE = "java.env"
LOGBACK_FILE = "logback.xml"

# Paths inside the server containers.

CONFIG_DIR = "/kubedoop/config"
DATA_DIR = "/kubedoop/data"
QUORUM_TLS_DIR = "/kubedoop/quorum_tls"
SERVER_TLS_DIR = "/kubedoop/server_tls"
CLIENT_TLS_DIR = "/kubedoop/client_tls"

# Defaults injected when neither the role nor the role group sets a value.

DEFAULT_GRACEFUL_SHUTDOWN = timedelta(seconds=120)
DEFAULT_INIT_LIMIT = 5
DEFAULT_SYNC_LIMIT = 2
DEFAULT_TICK_TIME = 3000
DEFAULT_MYID_OFFSET = 1

POD_ANTI_AFFINITY_WEIGHT = 70
"""Weight of the default soft anti-affinity between ensemble members."""

HEAP_LIMIT_RATIO = 0.8
"""Fraction of the container memory limit given to the JVM heap."""

# Labels.

LABEL_NAME = "app.kubernetes.io/name"
LABEL_COMPONENT = "app.kubernetes.io/component"
LABEL_MANAGED_BY = "app.kubernetes.io/managed-by"
LABEL_ROLE_GROUP = "app.kubernetes.io/role-group"
MANAGED_BY = "zookeeper-operator"
SERVER_ROLE = "server"

SERVICE_NAME_LABEL = "kubernetes.io/service-name"
"""Label linking an EndpointSlice to the Service it backs."""
