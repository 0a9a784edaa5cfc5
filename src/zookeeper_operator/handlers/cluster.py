"""Handlers for ``ZookeeperCluster`` objects."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    CLUSTER_PLURAL,
    CLUSTER_RECONCILE_INTERVAL,
    GROUP,
    VERSION,
)
from .errors import body_to_dict, handle_errors
from .lifecycle import get_factory

__all__ = ["reconcile_cluster", "refresh_cluster"]


@kopf.on.resume(GROUP, VERSION, CLUSTER_PLURAL)
@kopf.on.create(GROUP, VERSION, CLUSTER_PLURAL)
@kopf.on.update(GROUP, VERSION, CLUSTER_PLURAL)
async def reconcile_cluster(
    body: kopf.Body, memo: kopf.Memo, **_: Any
) -> None:
    """Reconcile a cluster after it was created or changed."""
    await _reconcile(body, memo)


@kopf.timer(
    GROUP,
    VERSION,
    CLUSTER_PLURAL,
    interval=CLUSTER_RECONCILE_INTERVAL.total_seconds(),
    initial_delay=CLUSTER_RECONCILE_INTERVAL.total_seconds(),
)
async def refresh_cluster(body: kopf.Body, memo: kopf.Memo, **_: Any) -> None:
    """Periodically reconcile a cluster.

    This picks up changes to objects that are not watched, such as the
    EndpointSlices behind an externally exposed cluster.
    """
    await _reconcile(body, memo)


async def _reconcile(body: kopf.Body, memo: kopf.Memo) -> None:
    obj = body_to_dict(body)
    metadata = obj["metadata"]
    factory = get_factory(
        memo, namespace=metadata["namespace"], name=metadata["name"]
    )
    reconciler = factory.create_cluster_reconciler()
    async with handle_errors(memo.context, factory.logger):
        await reconciler.reconcile(obj)
