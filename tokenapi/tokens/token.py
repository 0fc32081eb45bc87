from __future__ import annotations
import json
from typing import Any, Dict, Tuple

from tokenapi.account_ids import AccountId, ChainId, EVM_NAMESPACE
from tokenapi.errors import IdentifierError

#: Largest value for ``decimals`` (``uint8``)
MAX_DECIMALS = 255
#: Largest chain id the cache can store (signed 64-bit column)
MAX_STORED_CHAIN_ID = 2**63 - 1


class TokenDetails:
    """
    Ecosystem specific part of a :class:`Token`.

    Subclasses set :attr:`kind` so that storage and serialization can
    branch on the ecosystem without knowing the concrete class.
    """

    #: Ecosystem tag, e.g. ``evm``
    kind: str

    def summary(self) -> str:
        """
        Short human readable description
        """
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError


class EvmTokenDetails(TokenDetails):
    """
    Details for an ERC20 token on an EVM chain.
    """

    kind = "evm"

    #: CAIP-2 chain id (``eip155`` namespace)
    chain_id: ChainId
    #: Token contract address (EIP-55 checksum)
    address: str

    def __init__(self, chain_id: ChainId, address: str):
        self.chain_id = chain_id
        self.address = address

    @staticmethod
    def from_account_id(account_id: AccountId) -> EvmTokenDetails:
        """
        Details consistent with ``account_id``
        """
        return EvmTokenDetails(account_id.chain_id, account_id.address)

    @property
    def evm_chain_id(self) -> int:
        """
        Numeric EVM chain id
        """
        return int(self.chain_id.reference)

    def summary(self) -> str:
        return f"ERC20 {self.address} on chain {self.chain_id.reference}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "chainId": str(self.chain_id),
            "address": self.address,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"EvmTokenDetails({json.dumps(self.to_dict())})"


class Token:
    """
    Fungible token metadata (name, symbol, decimals) keyed by a CAIP-10
    :class:`tokenapi.account_ids.AccountId`.

    The universal fields are shared by all ecosystems, while
    :attr:`details` holds the ecosystem specific part.

    Note:
        ``id`` and ``details`` must describe the same chain and address.
        This is established by :class:`tokenapi.tokens.TokensService`
        when the token is built, the repo doesn't check it.
    """

    #: Token id
    id: AccountId
    #: Token name
    name: str
    #: Token symbol
    symbol: str
    #: Token decimals (0-255)
    decimals: int
    #: Ecosystem specific details
    details: TokenDetails

    def __init__(
        self,
        id: AccountId,
        name: str,
        symbol: str,
        decimals: int,
        details: TokenDetails,
    ):
        self.id = id
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.details = details

    @staticmethod
    def from_row(row: Tuple[str, int, str, str, int, str]) -> Token:
        """
        Deserialize from database row

        Args:
            row: database row

        Raises:
            ValueError: if the row doesn't form a valid token
        """
        id, chain_id, address, symbol, decimals, name = row
        account_id = AccountId.parse(id)
        if account_id.namespace != EVM_NAMESPACE:
            raise IdentifierError(f"Not an evm token id `{id}`")
        details = EvmTokenDetails.from_account_id(account_id)
        if details.evm_chain_id != chain_id or details.address != address:
            raise ValueError(f"Row for `{id}` doesn't match its id")
        return Token(
            account_id, name, symbol, _check_decimals(decimals), details
        )

    def to_row(self) -> Tuple[str, int, str, str, int, str]:
        """
        Serialize to database row

        Returns:
            database row

        Raises:
            ValueError: if decimals are out of the ``uint8`` range or the
                chain id doesn't fit the chain id column
        """
        if not isinstance(self.details, EvmTokenDetails):
            raise ValueError(f"Can't store {self.details.kind} token details")
        if self.details.evm_chain_id > MAX_STORED_CHAIN_ID:
            raise ValueError(f"Chain id {self.details.evm_chain_id} is too large to store")
        return (
            str(self.id),
            self.details.evm_chain_id,
            self.details.address,
            self.symbol,
            _check_decimals(self.decimals),
            self.name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Token` to dict
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "details": self.details.to_dict(),
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Token({json.dumps(self.to_dict())})"


def _check_decimals(decimals: int) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValueError(f"Decimals must be an integer, got `{decimals!r}`")
    if decimals < 0 or decimals > MAX_DECIMALS:
        raise ValueError(f"Decimals {decimals} out of range 0-{MAX_DECIMALS}")
    return decimals
