"""
Reading ERC20 token metadata from EVM chains.

Example:
    ::

        from tokenapi.evm import ERC20MetasFetcher

        fetcher = ERC20MetasFetcher()
        usdc = await fetcher.fetch(1, "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "https://eth.llamarpc.com")
        # => ERC20Metadata({"name": "USD Coin", "symbol": "USDC", "decimals": 6})
"""

from tokenapi.evm.erc20_metadata import ERC20Metadata
from tokenapi.evm.fetcher import ERC20MetasFetcher
