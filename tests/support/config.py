"""Build test configurations for the ZooKeeper operator."""

from __future__ import annotations

from pathlib import Path

from zookeeper_operator.config import Config
from zookeeper_operator.dependencies.config import config_dependency

__all__ = ["configure"]


def configure(directory: str) -> Config:
    """Configure or reconfigure with a test configuration.

    Parameters
    ----------
    directory
        Configuration directory to use.

    Returns
    -------
    Config
        New configuration.
    """
    config_path = Path(__file__).parent.parent / "data" / directory / "input"
    config_dependency.set_path(config_path / "config.yaml")
    return config_dependency.config
