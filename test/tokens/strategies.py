from string import ascii_letters
from hypothesis.strategies import SearchStrategy, builds, integers, text
from account_ids.strategies import evm_account_id
from tokenapi.account_ids import AccountId
from tokenapi.tokens import EvmTokenDetails, Token


def _token(account_id: AccountId, name: str, symbol: str, decimals: int) -> Token:
    return Token(
        account_id, name, symbol, decimals, EvmTokenDetails.from_account_id(account_id)
    )


def token() -> SearchStrategy[Token]:
    return builds(
        _token,
        evm_account_id(),
        text(ascii_letters + " "),
        text(ascii_letters),
        integers(0, 255),
    )
