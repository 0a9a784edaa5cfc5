"""Operator startup and shutdown handlers."""

from __future__ import annotations

from typing import Any

import kopf
import structlog
from safir.kubernetes import initialize_kubernetes

from ..constants import ZNODE_FINALIZER
from ..dependencies.config import config_dependency
from ..factory import Factory, ProcessContext

__all__ = ["get_factory", "shutdown", "startup"]


@kopf.on.startup()
async def startup(
    memo: kopf.Memo, settings: kopf.OperatorSettings, **_: Any
) -> None:
    """Initialize the Kubernetes client and build the process context."""
    config = config_dependency.config
    settings.persistence.finalizer = ZNODE_FINALIZER
    await initialize_kubernetes()
    memo.context = await ProcessContext.from_config(config)
    structlog.get_logger(__name__).info("Operator started")


@kopf.on.cleanup()
async def shutdown(memo: kopf.Memo, **_: Any) -> None:
    """Release resources held by the process context."""
    context: ProcessContext | None = memo.get("context")
    if context:
        await context.aclose()


def get_factory(memo: kopf.Memo, **bindings: str) -> Factory:
    """Create a component factory for one handler invocation.

    Parameters
    ----------
    memo
        Operator memo holding the process context.
    **bindings
        Values to bind to the logger, such as the namespace and name of the
        object being reconciled.

    Returns
    -------
    Factory
        Factory whose components log with the given bindings.
    """
    logger = structlog.get_logger("zookeeper_operator").bind(**bindings)
    return Factory(memo.context, logger)
