"""Translation of operator exceptions into reconcile outcomes."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

import kopf
from structlog.stdlib import BoundLogger

from ..exceptions import (
    KubernetesError,
    MissingObjectError,
    ValidationError,
    ZooKeeperError,
)
from ..factory import ProcessContext

__all__ = ["body_to_dict", "handle_errors"]


def body_to_dict(body: Mapping[str, Any]) -> dict[str, Any]:
    """Convert an object body delivered by kopf to plain dictionaries."""
    return {k: _to_plain(v) for k, v in body.items()}


def _to_plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    return value


@asynccontextmanager
async def handle_errors(
    context: ProcessContext,
    logger: BoundLogger,
    *,
    retry_invalid: bool = False,
    retry: int = 0,
) -> AsyncIterator[None]:
    """Convert operator exceptions into kopf retry decisions.

    Invalid objects are not retried, since they will fail the same way until
    a user changes them, and are reported to Slack if a webhook is
    configured. Everything else is retried after the configured delay.

    Parameters
    ----------
    context
        Per-process operator context.
    logger
        Logger bound to the object being reconciled.
    retry_invalid
        If `True`, retry invalid objects as well. Used by deletion handlers,
        which must eventually succeed for the object to go away.
    retry
        Number of earlier attempts kopf has made for this handler. When
        retrying invalid objects, only the first attempt is reported to
        Slack.

    Raises
    ------
    kopf.PermanentError
        Raised for invalid objects unless ``retry_invalid`` is set.
    kopf.TemporaryError
        Raised for all other failures.
    """
    delay = context.config.retry_delay.total_seconds()
    try:
        yield
    except ValidationError as e:
        logger.error("Invalid object", error=str(e), detail=e.error)
        if context.slack_client and not (retry_invalid and retry > 0):
            await context.slack_client.post_exception(e)
        if retry_invalid:
            raise kopf.TemporaryError(str(e), delay=delay) from e
        raise kopf.PermanentError(str(e)) from e
    except MissingObjectError as e:
        logger.warning("Missing dependency, retrying", error=str(e))
        raise kopf.TemporaryError(str(e), delay=delay) from e
    except (KubernetesError, ZooKeeperError, TimeoutError) as e:
        logger.exception("Reconcile failed, retrying", error=str(e))
        raise kopf.TemporaryError(str(e), delay=delay) from e
