"""Tests for the operator startup and shutdown handlers."""

from __future__ import annotations

import kopf
import pytest

from zookeeper_operator.config import Config
from zookeeper_operator.constants import ZNODE_FINALIZER
from zookeeper_operator.factory import ProcessContext
from zookeeper_operator.handlers.lifecycle import (
    get_factory,
    shutdown,
    startup,
)

from ..support.kubernetes import MockKubernetesApi


@pytest.mark.asyncio
async def test_startup(
    config: Config, mock_kubernetes: MockKubernetesApi
) -> None:
    memo = kopf.Memo()
    settings = kopf.OperatorSettings()

    await startup(memo=memo, settings=settings)
    assert settings.persistence.finalizer == ZNODE_FINALIZER
    context = memo.context
    assert isinstance(context, ProcessContext)
    assert context.config is config
    assert context.slack_client is None

    factory = get_factory(memo, namespace="default", name="zk")
    assert factory.create_cluster_reconciler()
    assert factory.create_znode_manager()

    await shutdown(memo=memo)
    context.kubernetes_client.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_shutdown_without_startup() -> None:
    await shutdown(memo=kopf.Memo())
