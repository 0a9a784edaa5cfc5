"""Tests for unit conversions."""

from __future__ import annotations

import pytest

from zookeeper_operator.units import memory_to_bytes, memory_to_mebibytes


def test_memory_to_bytes() -> None:
    assert memory_to_bytes("1Gi") == 1024 * 1024 * 1024
    assert memory_to_bytes("512Mi") == 512 * 1024 * 1024

    with pytest.raises(ValueError):
        memory_to_bytes("lots")


def test_memory_to_mebibytes() -> None:
    assert memory_to_mebibytes("1Gi") == 1024
    assert memory_to_mebibytes("2Gi") == 2048
    assert memory_to_mebibytes("1536Mi") == 1536
