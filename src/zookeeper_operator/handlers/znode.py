"""Handlers for ``ZookeeperZnode`` objects."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import GROUP, VERSION, ZNODE_PLURAL
from .errors import body_to_dict, handle_errors
from .lifecycle import get_factory

__all__ = ["delete_znode", "reconcile_znode"]


@kopf.on.resume(GROUP, VERSION, ZNODE_PLURAL)
@kopf.on.create(GROUP, VERSION, ZNODE_PLURAL)
@kopf.on.update(GROUP, VERSION, ZNODE_PLURAL)
async def reconcile_znode(body: kopf.Body, memo: kopf.Memo, **_: Any) -> None:
    """Create the znode of a request and publish how to reach it."""
    obj = body_to_dict(body)
    metadata = obj["metadata"]
    factory = get_factory(
        memo, namespace=metadata["namespace"], name=metadata["name"]
    )
    manager = factory.create_znode_manager()
    async with handle_errors(memo.context, factory.logger):
        await manager.reconcile(obj)


@kopf.on.delete(GROUP, VERSION, ZNODE_PLURAL)
async def delete_znode(
    body: kopf.Body, memo: kopf.Memo, retry: int = 0, **_: Any
) -> None:
    """Delete the znode of a request before the request goes away.

    Registering this handler makes kopf keep a finalizer on every request,
    so the request is not removed until this succeeds. All failures are
    retried, since giving up would orphan the znode.
    """
    obj = body_to_dict(body)
    metadata = obj["metadata"]
    factory = get_factory(
        memo, namespace=metadata["namespace"], name=metadata["name"]
    )
    manager = factory.create_znode_manager()
    async with handle_errors(
        memo.context, factory.logger, retry_invalid=True, retry=retry
    ):
        await manager.cleanup(obj)
