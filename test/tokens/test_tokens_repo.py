import threading
import pytest
from hypothesis import HealthCheck, given, settings

from tokens.strategies import token
from fixtures.tokens import usdc
from fixtures.w3 import USDC
from tokenapi.account_ids import AccountId
from tokenapi.db import ConnectionPool
from tokenapi.errors import ConflictError, RepositoryError
from tokenapi.tokens import Token, TokensRepo


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(t=token())
def test_read_write(t: Token, tokens_repo: TokensRepo):
    assert tokens_repo.get(t.id) is None
    tokens_repo.save(t)
    assert tokens_repo.get(t.id) == t
    tokens_repo.purge()


def test_read_write_in_memory():
    pool = ConnectionPool(":memory:", size=2)
    repo = TokensRepo(pool=pool)
    # Checkouts rotate, so the read runs on a different connection
    repo.save(usdc())
    assert repo.get(usdc().id) == usdc()
    assert repo.get(usdc().id) == usdc()
    pool.close()


def test_get_missing(tokens_repo: TokensRepo):
    assert tokens_repo.get(AccountId.build("eip155", "1", USDC)) is None


def test_lookup_is_case_insensitive_on_input(tokens_repo: TokensRepo):
    tokens_repo.save(usdc())
    assert tokens_repo.get(AccountId.build("eip155", "1", USDC.lower())) == usdc()


def test_duplicate_save_conflicts(tokens_repo: TokensRepo):
    # sqlite doesn't overwrite on a duplicate primary key, concurrent
    # resolutions rely on this to reconcile.
    tokens_repo.save(usdc())
    with pytest.raises(ConflictError):
        tokens_repo.save(usdc(decimals=18))
    assert tokens_repo.get(usdc().id).decimals == 6


def test_conflict_is_repository_error(tokens_repo: TokensRepo):
    tokens_repo.save(usdc())
    with pytest.raises(RepositoryError):
        tokens_repo.save(usdc())


def test_save_rejects_out_of_range_decimals(tokens_repo: TokensRepo):
    with pytest.raises(RepositoryError):
        tokens_repo.save(usdc(decimals=256))
    assert tokens_repo.get(usdc().id) is None


def test_save_rejects_chain_id_above_int64(tokens_repo: TokensRepo):
    with pytest.raises(RepositoryError):
        tokens_repo.save(usdc(chain_id=2**63))
    assert tokens_repo.get(usdc(chain_id=2**63).id) is None


def test_largest_storable_chain_id_roundtrips(tokens_repo: TokensRepo):
    tokens_repo.save(usdc(chain_id=2**63 - 1))
    assert tokens_repo.get(usdc(chain_id=2**63 - 1).id) == usdc(chain_id=2**63 - 1)


def test_corrupt_row_is_error(tokens_repo: TokensRepo, pool: ConnectionPool):
    with pool.connection() as conn:
        conn.execute(
            "INSERT INTO evm_tokens VALUES(?,?,?,?,?,?)",
            (f"eip155:1:{USDC}", 1, USDC, "USDC", 300, "USD Coin"),
        )
        conn.commit()
    with pytest.raises(RepositoryError):
        tokens_repo.get(usdc().id)


def test_purge(tokens_repo: TokensRepo):
    tokens_repo.save(usdc())
    tokens_repo.purge()
    assert tokens_repo.get(usdc().id) is None


def test_concurrent_saves_keep_one_row(tokens_repo: TokensRepo, pool: ConnectionPool):
    results = []

    def save():
        try:
            tokens_repo.save(usdc())
            results.append("saved")
        except ConflictError:
            results.append("conflict")

    threads = [threading.Thread(target=save) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == ["conflict"] * 7 + ["saved"]
    with pool.connection() as conn:
        assert conn.execute("SELECT count(*) FROM evm_tokens").fetchone() == (1,)


def test_pool_exhaustion(cache_path: str):
    pool = ConnectionPool(cache_path, size=1, timeout=0.01)
    repo = TokensRepo(pool=pool)
    with pool.connection():
        with pytest.raises(RepositoryError):
            repo.get(usdc().id)
    assert repo.get(usdc().id) is None
    pool.close()
