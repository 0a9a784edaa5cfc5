"""Test fixtures for ZooKeeper operator tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
import respx
from pydantic import SecretStr
from safir.testing.slack import MockSlackWebhook, mock_slack_webhook

from zookeeper_operator.config import Config
from zookeeper_operator.factory import Factory, ProcessContext

from .support.config import configure
from .support.kubernetes import MockKubernetesApi, patch_kubernetes
from .support.zookeeper import MockZooKeeper, patch_zookeeper


@pytest.fixture
def config() -> Config:
    """Construct default configuration for tests."""
    return configure("standard")


@pytest_asyncio.fixture
async def context(
    config: Config,
    mock_kubernetes: MockKubernetesApi,
    mock_zookeeper: MockZooKeeper,
    mock_slack: MockSlackWebhook,
) -> AsyncIterator[ProcessContext]:
    """Create the per-process context normally built at operator startup."""
    context = await ProcessContext.from_config(config)
    yield context
    await context.aclose()


@pytest_asyncio.fixture
async def factory(
    config: Config,
    mock_kubernetes: MockKubernetesApi,
    mock_zookeeper: MockZooKeeper,
    mock_slack: MockSlackWebhook,
) -> AsyncIterator[Factory]:
    """Create a component factory for tests."""
    async with Factory.standalone(config) as factory:
        yield factory


@pytest.fixture
def mock_kubernetes() -> Iterator[MockKubernetesApi]:
    yield from patch_kubernetes()


@pytest.fixture
def mock_slack(
    config: Config, respx_mock: respx.Router
) -> Iterator[MockSlackWebhook]:
    webhook = "https://slack.example.com/webhook"
    config.slack_webhook = SecretStr(webhook)
    yield mock_slack_webhook(webhook, respx_mock)
    config.slack_webhook = None


@pytest.fixture
def mock_zookeeper() -> Iterator[MockZooKeeper]:
    yield from patch_zookeeper()
