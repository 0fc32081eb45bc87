import pytest
from hypothesis import given

from tokens.strategies import token
from fixtures.tokens import usdc
from fixtures.w3 import USDC
from tokenapi.account_ids import ChainId
from tokenapi.tokens import Token


@given(token())
def test_token_rows(t: Token):
    assert Token.from_row(t.to_row()) == t


def test_token_row_layout():
    assert usdc().to_row() == (f"eip155:1:{USDC}", 1, USDC, "USDC", 6, "USD Coin")


def test_token_dict():
    assert usdc().to_dict() == {
        "id": f"eip155:1:{USDC}",
        "name": "USD Coin",
        "symbol": "USDC",
        "decimals": 6,
        "details": {"kind": "evm", "chainId": "eip155:1", "address": USDC},
    }


def test_details_match_id():
    t = usdc()
    assert t.details.chain_id == ChainId("eip155", "1")
    assert t.details.address == t.id.address
    assert t.details.evm_chain_id == 1
    assert t.details.kind == "evm"
    assert USDC in t.details.summary()


@pytest.mark.parametrize("decimals", [-1, 256, 2**32])
def test_to_row_rejects_out_of_range_decimals(decimals: int):
    with pytest.raises(ValueError):
        usdc(decimals).to_row()


@pytest.mark.parametrize("chain_id", [2**63, 2**64, 10**31])
def test_to_row_rejects_chain_ids_above_int64(chain_id: int):
    with pytest.raises(ValueError):
        usdc(chain_id=chain_id).to_row()


def test_to_row_keeps_largest_storable_chain_id():
    assert usdc(chain_id=2**63 - 1).to_row()[1] == 2**63 - 1


@pytest.mark.parametrize(
    "row",
    [
        (f"eip155:1:{USDC}", 1, USDC, "USDC", 300, "USD Coin"),
        (f"eip155:1:{USDC}", 1, USDC, "USDC", -1, "USD Coin"),
        (f"eip155:1:{USDC}", 137, USDC, "USDC", 6, "USD Coin"),
        (f"eip155:1:{USDC}", 1, USDC.lower(), "USDC", 6, "USD Coin"),
        ("garbage", 1, USDC, "USDC", 6, "USD Coin"),
        (f"solana:mainnet:{USDC}", 1, USDC, "USDC", 6, "USD Coin"),
    ],
)
def test_from_row_rejects_corrupt_rows(row):
    with pytest.raises(ValueError):
        Token.from_row(row)
