"""
Implements :class:`Core` that is used in other modules.
"""

from __future__ import annotations
import os
import threading
from functools import cached_property
from eth_utils import to_checksum_address

from tokenapi.db import DEFAULT_POOL_SIZE, ConnectionPool, path_from_url

#: Canonical `Multicall3 <https://www.multicall3.com/>`_ deployment address
DEFAULT_MULTICALL_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"

pool_cache = {}
pool_cache_lock = threading.Lock()


class Core:
    """
    A base class for any class that wants to use the
    token cache database or talk to an Ethereum RPC.

    When deriving this class, you're providing arguments like the
    database url or pool size. The resources are instantiated
    on demand though. It means that if you're just calling an RPC
    it's fine to skip the database url in the constructor.

    So this class is lightweight and safe to derive from any other
    class.

    **Configuration**

    Every argument falls back to an environment variable when it's
    not passed explicitly:

    +-----------------------+---------------------------------+-----------+
    | Argument              | Environment variable            | Default   |
    +=======================+=================================+===========+
    | ``database_url``      | ``TOKENAPI_DATABASE_URL``       | required  |
    +-----------------------+---------------------------------+-----------+
    | ``pool_size``         | ``TOKENAPI_POOL_SIZE``          | 5         |
    +-----------------------+---------------------------------+-----------+
    | ``pool_timeout``      | ``TOKENAPI_POOL_TIMEOUT``       | no limit  |
    +-----------------------+---------------------------------+-----------+
    | ``multicall_address`` | ``TOKENAPI_MULTICALL_ADDRESS``  | Multicall3|
    +-----------------------+---------------------------------+-----------+

    **Caching**

    Connection pools are cached by the database path, pool size and
    timeout, so every :class:`Core` with the same database settings
    shares one pool.

    Args:
        database_url: ``sqlite:///path`` url or OS path to the cache database
        pool_size: Number of pooled database connections
        pool_timeout: Seconds to wait for a free database connection
        multicall_address: Address of the Multicall3 contract
        pool: an instance of :class:`tokenapi.db.ConnectionPool` (overrides database_url)
    """

    #: Url or OS path to the cache database.
    #: Can be ``None`` if :class:`tokenapi.db.ConnectionPool` is injected directly.
    database_url: str | None

    def __init__(
        self,
        database_url: str | None = None,
        pool_size: int | None = None,
        pool_timeout: float | None = None,
        multicall_address: str | None = None,
        pool: ConnectionPool | None = None,
    ):
        self.database_url = database_url
        self._pool_size = pool_size
        self._pool_timeout = pool_timeout
        self._multicall_address = multicall_address
        self._pool = pool

    @cached_property
    def pool_size(self) -> int:
        """
        Number of pooled database connections
        """
        if not self._pool_size is None:
            return self._pool_size
        env_value = os.environ.get("TOKENAPI_POOL_SIZE")
        if env_value:
            return int(env_value)
        return DEFAULT_POOL_SIZE

    @cached_property
    def pool_timeout(self) -> float | None:
        """
        Seconds to wait for a free database connection (``None`` is no limit)
        """
        if not self._pool_timeout is None:
            return self._pool_timeout
        env_value = os.environ.get("TOKENAPI_POOL_TIMEOUT")
        if env_value:
            return float(env_value)
        return None

    @cached_property
    def multicall_address(self) -> str:
        """
        Checksummed address of the Multicall3 contract used for batched reads

        Raises:
            ValueError: if the configured address is malformed
        """
        address = (
            self._multicall_address
            or os.environ.get("TOKENAPI_MULTICALL_ADDRESS")
            or DEFAULT_MULTICALL_ADDRESS
        )
        try:
            return to_checksum_address(address)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid multicall address `{address}`") from e

    @cached_property
    def pool(self) -> ConnectionPool:
        """
        :class:`tokenapi.db.ConnectionPool` to the cache database
        """
        if not self._pool is None:
            return self._pool

        if not self.database_url:
            self.database_url = os.environ.get("TOKENAPI_DATABASE_URL")

        if not self.database_url:
            raise ValueError(
                "Database url is not set. \
                Use `TOKENAPI_DATABASE_URL` env variable or pass database_url explicitly"
            )

        path = path_from_url(self.database_url)
        key = (path, self.pool_size, self.pool_timeout)
        with pool_cache_lock:
            if not key in pool_cache:
                pool_cache[key] = ConnectionPool(
                    path, size=self.pool_size, timeout=self.pool_timeout
                )
            return pool_cache[key]
