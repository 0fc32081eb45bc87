import os
import pytest

from tokenapi.db import ConnectionPool


rpc = pytest.mark.skipif(
    "TEST_WEB3_PROVIDER_URI" not in os.environ,
    reason="Rpc url is not set. Use `TEST_WEB3_PROVIDER_URI` env variable.",
)


@pytest.fixture
def cache_path(tmp_path: str) -> str:
    """
    Temp path for cache
    """
    return f"{tmp_path}/test.db"


@pytest.fixture
def pool(cache_path: str) -> ConnectionPool:
    """
    Instance of db.ConnectionPool
    """
    pool = ConnectionPool(cache_path, size=2, timeout=1)
    try:
        yield pool
    finally:
        pool.close()
