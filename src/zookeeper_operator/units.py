"""Unit conversions for Kubernetes resource quantities."""

from __future__ import annotations

import bitmath

__all__ = ["memory_to_bytes", "memory_to_mebibytes"]


def memory_to_bytes(memory: str) -> int:
    """Convert a string representation of memory to a number of bytes.

    Parameters
    ----------
    memory
        Amount of memory as a string, such as ``1Gi`` or ``512M``.

    Returns
    -------
    int
        Equivalent number of bytes.

    Raises
    ------
    ValueError
        Raised if the input string is not a valid byte specification.
    """
    return int(bitmath.parse_string_unsafe(memory).bytes)


def memory_to_mebibytes(memory: str) -> int:
    """Convert a string representation of memory to whole mebibytes."""
    return memory_to_bytes(memory) // (1024 * 1024)
