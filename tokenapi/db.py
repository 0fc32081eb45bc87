"""
This module contains a bounded pool of sqlite3 connections shared by all
repos of :mod:`tokenapi`.
"""

from __future__ import annotations
import logging
import uuid
from contextlib import contextmanager
from queue import Empty, Queue
from sqlite3 import Connection, connect
from typing import Iterator

from tokenapi.errors import RepositoryError

logger = logging.getLogger(__name__)

SQLITE_URL_PREFIX = "sqlite:///"
DEFAULT_POOL_SIZE = 5
MEMORY_PATH = ":memory:"


class ConnectionPool:
    """
    Bounded pool of sqlite3 connections.

    Connections are checked out with :meth:`connection`. When all of them
    are in use, the caller blocks until one is released (or until
    ``timeout`` seconds pass, if set). A connection is used by one thread at
    a time, but may be used by different threads over its lifetime.

    A ``:memory:`` pool opens one private in-memory database in shared
    cache mode, so all of its connections see the same tables and rows.

    Args:
        path: OS path to the database
        size: Number of connections in the pool
        timeout: Seconds to wait for a free connection. ``None`` waits forever.

    Examples:

        ::

            pool = ConnectionPool("cache.sqlite3")
            with pool.connection() as conn:
                conn.execute("SELECT count(*) FROM evm_tokens")
    """

    #: OS path to the database
    path: str
    #: Number of connections in the pool
    size: int
    #: Seconds to wait for a free connection
    timeout: float | None
    _connections: Queue

    def __init__(
        self, path: str, size: int = DEFAULT_POOL_SIZE, timeout: float | None = None
    ):
        if size < 1:
            raise ValueError(f"Pool size must be positive, got {size}")
        self.path = path
        self.size = size
        self.timeout = timeout
        self._connections = Queue(maxsize=size)
        uri = _memory_uri() if path == MEMORY_PATH else None
        for i in range(size):
            conn = _connect(path, uri)
            if i == 0:
                _init_db(conn)
            self._connections.put(conn)
        logger.debug("Opened %d sqlite connections to %s", size, path)

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """
        Check out a connection and return it to the pool afterwards.
        Uncommitted changes are rolled back before the connection is returned.

        Raises:
            RepositoryError: if no connection was released within :attr:`timeout`
        """
        try:
            conn = self._connections.get(timeout=self.timeout)
        except Empty as e:
            raise RepositoryError(
                f"No free database connection after {self.timeout}s"
            ) from e
        try:
            yield conn
        finally:
            if conn.in_transaction:
                conn.rollback()
            self._connections.put(conn)

    def close(self):
        """
        Close all idle connections
        """
        while True:
            try:
                conn = self._connections.get_nowait()
            except Empty:
                return
            conn.close()


def path_from_url(url: str) -> str:
    """
    Extract a database path from ``sqlite:///path`` url. Plain paths are
    returned as is.

    Args:
        url: database url or path

    Returns:
        OS path to the database
    """
    if url.startswith(SQLITE_URL_PREFIX):
        url = url[len(SQLITE_URL_PREFIX) :]
    if not url:
        raise ValueError("Database path is empty")
    return url


def _connect(path: str, uri: str | None = None) -> Connection:
    if uri:
        return connect(uri, uri=True, check_same_thread=False)
    return connect(path, check_same_thread=False)


def _memory_uri() -> str:
    # Lives as long as one of the pool connections is open
    return f"file:tokenapi-{uuid.uuid4().hex}?mode=memory&cache=shared"


def _init_db(conn: Connection):
    """
    Initialize db schema

    Args:
        conn: Connection to the database

    Note:
        The schema migrations are currently not supported.
    """
    cursor = conn.cursor()
    # EVM tokens table
    cursor.execute(
        """CREATE TABLE IF NOT EXISTS evm_tokens
                (id text PRIMARY KEY NOT NULL, chain_id integer NOT NULL, \
                address text NOT NULL, symbol text NOT NULL, \
                decimals integer NOT NULL, name text NOT NULL)"""
    )
    conn.commit()
