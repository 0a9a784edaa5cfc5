"""Tests for the reconcile deadline."""

from __future__ import annotations

from datetime import timedelta

import pytest

from zookeeper_operator.timeout import Timeout


def test_left() -> None:
    timeout = Timeout(timedelta(seconds=30))
    assert 0 < timeout.left() <= 30


def test_expired() -> None:
    timeout = Timeout(timedelta(seconds=0), "Reconciling zk")
    with pytest.raises(TimeoutError, match="Reconciling zk exceeded 0.0s"):
        timeout.left()
