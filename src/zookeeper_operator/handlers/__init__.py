"""kopf handlers for the operator's custom resources.

Importing this package registers all handlers with kopf.
"""

from . import cluster, lifecycle, znode

__all__ = ["cluster", "lifecycle", "znode"]
