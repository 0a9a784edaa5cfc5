"""Storage layer for znodes in a managed ZooKeeper ensemble."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from kazoo.client import KazooClient
from kazoo.exceptions import KazooException, NodeExistsError, NoNodeError
from kazoo.handlers.threading import KazooTimeoutError
from structlog.stdlib import BoundLogger

from ..config import ZooKeeperClientConfig
from ..exceptions import ZooKeeperError

__all__ = ["ZooKeeperStorage"]

T = TypeVar("T")


class ZooKeeperStorage:
    """Create and delete znodes in remote ensembles.

    kazoo is synchronous, so each operation opens a dedicated session in a
    worker thread and closes it again before returning, whether or not the
    operation succeeded. No connection is held between reconciles. If the
    calling task is cancelled, the session is stopped so that the worker
    thread abandons any request still waiting on the ensemble.

    Parameters
    ----------
    config
        Client configuration for talking to ensembles.
    logger
        Logger to use.
    """

    def __init__(
        self, config: ZooKeeperClientConfig, logger: BoundLogger
    ) -> None:
        self._config = config
        self._logger = logger

    async def ensure_znode(self, hosts: str, path: str) -> bool:
        """Create a znode unless it already exists.

        Parameters
        ----------
        hosts
            Comma-separated ``host:port`` list of the ensemble.
        path
            Absolute path of the znode.

        Returns
        -------
        bool
            `True` if the znode was created, `False` if it already existed.

        Raises
        ------
        ZooKeeperError
            Raised if the ensemble could not be reached or the request
            failed.
        """
        logger = self._logger.bind(hosts=hosts, path=path)
        zk = self._build_client(hosts)
        created = await self._run(zk, self._ensure_znode, hosts, path)
        if created:
            logger.info("Created znode")
        else:
            logger.debug("Znode already exists")
        return created

    async def delete_znode(self, hosts: str, path: str) -> None:
        """Delete a znode and everything below it.

        A znode that does not exist is treated as already deleted.

        Parameters
        ----------
        hosts
            Comma-separated ``host:port`` list of the ensemble.
        path
            Absolute path of the znode.

        Raises
        ------
        ZooKeeperError
            Raised if the ensemble could not be reached or the request
            failed.
        """
        zk = self._build_client(hosts)
        await self._run(zk, self._delete_znode, hosts, path)
        self._logger.info("Deleted znode", hosts=hosts, path=path)

    async def _run(
        self,
        zk: KazooClient,
        operation: Callable[[KazooClient, str, str], T],
        hosts: str,
        path: str,
    ) -> T:
        """Run a blocking operation in a worker thread.

        Cancelling the awaiting task stops the session, since the thread
        itself cannot be interrupted.
        """
        try:
            return await asyncio.to_thread(operation, zk, hosts, path)
        except asyncio.CancelledError:
            self._logger.warning(
                "Stopping ZooKeeper session of cancelled operation",
                hosts=hosts,
                path=path,
            )
            zk.stop()
            raise

    def _ensure_znode(self, zk: KazooClient, hosts: str, path: str) -> bool:
        with self._session(zk, hosts, path, "Cannot create znode"):
            if zk.exists(path):
                return False
            try:
                zk.create(path, makepath=True)
            except NodeExistsError:
                return False
            return True

    def _delete_znode(self, zk: KazooClient, hosts: str, path: str) -> None:
        with self._session(zk, hosts, path, "Cannot delete znode"):
            self._delete_tree(zk, path)

    def _delete_tree(self, zk: KazooClient, path: str) -> None:
        """Delete a subtree depth-first, children before their parent."""
        try:
            children = zk.get_children(path)
        except NoNodeError:
            return
        for child in sorted(children):
            self._delete_tree(zk, f"{path.rstrip('/')}/{child}")
        self._logger.debug("Deleting znode", path=path)
        try:
            zk.delete(path)
        except NoNodeError:
            pass

    def _build_client(self, hosts: str) -> KazooClient:
        timeout = self._config.connect_timeout.total_seconds()
        return KazooClient(
            hosts=hosts, timeout=timeout, **self._tls_options()
        )

    @contextmanager
    def _session(
        self, zk: KazooClient, hosts: str, path: str, message: str
    ) -> Iterator[None]:
        """Open a session to an ensemble and close it on exit.

        Parameters
        ----------
        zk
            Client for the ensemble, not yet started.
        hosts
            Comma-separated ``host:port`` list of the ensemble.
        path
            Znode being acted on, for error reporting.
        message
            Summary used for any raised exception.

        Raises
        ------
        ZooKeeperError
            Raised for any failure talking to the ensemble.
        """
        timeout = self._config.connect_timeout.total_seconds()
        try:
            zk.start(timeout=timeout)
            yield
        except (KazooException, KazooTimeoutError) as e:
            error = f"{type(e).__name__}: {e!s}"
            raise ZooKeeperError(
                message, hosts=hosts, path=path, error=error
            ) from e
        finally:
            zk.stop()
            zk.close()

    def _tls_options(self) -> dict[str, str | bool]:
        if not self._config.use_ssl:
            return {}
        options: dict[str, str | bool] = {
            "use_ssl": True,
            "ca": str(self._config.ca_path),
        }
        if self._config.cert_path and self._config.key_path:
            options["certfile"] = str(self._config.cert_path)
            options["keyfile"] = str(self._config.key_path)
        return options
