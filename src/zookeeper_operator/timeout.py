"""Deadline shared by the Kubernetes calls of one reconcile."""

from __future__ import annotations

from datetime import datetime, timedelta

from safir.datetime import current_datetime

__all__ = ["Timeout"]


class Timeout:
    """Deadline for every Kubernetes call made while reconciling an object.

    kopf has no notion of a per-reconcile deadline, so each reconcile
    creates one of these and passes it down to the storage layer, which
    hands the remaining time to each API call as its request timeout.

    Parameters
    ----------
    limit
        Total time allowed for the reconcile.
    operation
        Human-readable description of the reconcile, used in the error
        raised once the deadline has passed.
    """

    def __init__(
        self, limit: timedelta, operation: str = "Reconcile"
    ) -> None:
        self.limit = limit
        self.operation = operation
        self.deadline: datetime = current_datetime(microseconds=True) + limit

    def left(self) -> float:
        """Seconds remaining before the deadline.

        Raises
        ------
        TimeoutError
            Raised if the deadline has passed. kopf retries the reconcile.
        """
        left = self.deadline - current_datetime(microseconds=True)
        if left <= timedelta(0):
            limit = self.limit.total_seconds()
            raise TimeoutError(f"{self.operation} exceeded {limit}s")
        return left.total_seconds()
