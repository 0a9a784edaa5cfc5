"""Kubernetes operator for ZooKeeper ensembles and the znodes they host."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

try:
    __version__ = version("zookeeper-operator")
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0"
