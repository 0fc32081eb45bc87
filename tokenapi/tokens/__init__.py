"""
Module for resolving and caching fungible token metadata
(name, symbol, decimals).

The main class of this module is :class:`TokensService`.
It reads token metadata from the cache database or, on a cache miss,
directly from the blockchain.

Example:
    ::

        from tokenapi.tokens import TokensService

        service = TokensService.create(database_url="sqlite:///tokens.sqlite3")
        usdc = await service.resolve(1, "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48", "https://eth.llamarpc.com")
        # => Token({"id": "eip155:1:0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "name": "USD Coin", "symbol": "USDC", "decimals": 6, "details": {"kind": "evm", "chainId": "eip155:1", "address": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"}})
"""

from tokenapi.tokens.token import EvmTokenDetails, Token, TokenDetails
from tokenapi.tokens.repo import TokensRepo
from tokenapi.tokens.service import TokensService
