from __future__ import annotations
import asyncio
import logging

from tokenapi.account_ids import AccountId, EVM_NAMESPACE
from tokenapi.core import Core
from tokenapi.errors import ConflictError, RepositoryError
from tokenapi.evm.fetcher import ERC20MetasFetcher
from tokenapi.repo import Repository
from tokenapi.tokens.repo import TokensRepo
from tokenapi.tokens.token import EvmTokenDetails, Token

logger = logging.getLogger(__name__)


class TokensService(Core):
    """
    Service for resolving ERC20 tokens metadata (name, symbol, decimals).

    The sole purpose of this service is to fetch token metadata from web3,
    cache it, and read from the cache on subsequent calls. Token metadata
    doesn't change after deployment, so cached tokens never expire.

    **Request/Response flow**

    ::

                    +---------------+         +-------------------+ +------------+
                    | TokensService |         | ERC20MetasFetcher | | TokensRepo |
                    +---------------+         +-------------------+ +------------+
         -----------------  |                           |                  |
         | Token request |-|                            |                  |
         |---------------| |                            |                  |
                           | Build CAIP-10 id           |                  |
                           |-----------------           |                  |
                           |                |           |                  |
                           |<----------------           |                  |
                           |                            |                  |
                           | Find token                 |                  |
                           |---------------------------------------------->|
                           |                            |                  |
                           | If cache miss: fetch       |                  |
                           |--------------------------->|                  |
                           |                            |                  |
                           | Save token                 |                  |
                           |---------------------------------------------->|
                           |                            |                  |
                           | If already saved: find token                  |
                           |---------------------------------------------->|
            -------------- |                            |                  |
            | Token       |-|                           |                  |
            |-------------| |                           |                  |

    **Concurrency**

    Every :meth:`resolve` call is independent. Repo calls block, so they
    run on the default thread pool and don't stall other resolutions.
    Concurrent misses for the same token are not coalesced: all of them
    fetch, one wins the insert and the rest read the winner's row back.

    Cancelling a resolution stops it at its next ``await``. A repo call
    already running in a worker thread still finishes and gives its
    connection back to the pool, so a save that got that far is kept.

    Args:
        tokens_repo: Token storage, usually :class:`TokensRepo`
        fetcher: :class:`tokenapi.evm.ERC20MetasFetcher` instance
        kwargs: Args for the :class:`tokenapi.core.Core`
    """

    _tokens_repo: Repository[Token]
    _fetcher: ERC20MetasFetcher

    def __init__(
        self, tokens_repo: Repository[Token], fetcher: ERC20MetasFetcher, **kwargs
    ):
        super().__init__(**kwargs)
        self._tokens_repo = tokens_repo
        self._fetcher = fetcher

    @staticmethod
    def create(**kwargs) -> TokensService:
        """
        Create an instance of :class:`TokensService`

        Args:
            kwargs: Args for the :class:`tokenapi.core.Core`

        Returns:
            An instance of :class:`TokensService`
        """
        tokens_repo = TokensRepo(**kwargs)
        fetcher = ERC20MetasFetcher(**kwargs)
        return TokensService(tokens_repo, fetcher, **kwargs)

    async def resolve(self, chain_id: int, address: str, endpoint: str) -> Token:
        """
        Get token metadata by EVM chain id and token address.

        Args:
            chain_id: EVM chain id, e.g. ``1``
            address: token contract address (any casing)
            endpoint: RPC url for ``chain_id`` used on a cache miss

        Returns:
            An instance of :class:`Token`

        Raises:
            IdentifierError: if ``chain_id`` or ``address`` are malformed
            RepositoryError: if the cache database failed
            ChainConnectError: if the endpoint can't be reached
            ChainIdMismatch: if the endpoint is on a different chain
            BatchReadFailed: if the token contract couldn't be read

        Examples:
            ::

                service = TokensService.create(database_url="sqlite:///tokens.sqlite3")
                usdc = await service.resolve(1, "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48", "https://eth.llamarpc.com")
                # => Token({"id": "eip155:1:0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "name": "USD Coin", "symbol": "USDC", "decimals": 6, ...})
        """
        token_id = AccountId.build(EVM_NAMESPACE, str(chain_id), address)
        if not endpoint:
            raise ValueError("Rpc endpoint is empty")

        cached_token = await asyncio.to_thread(self._tokens_repo.get, token_id)
        if cached_token:
            logger.debug("Cache hit for %s", token_id)
            return cached_token

        logger.debug("Cache miss for %s, fetching from chain", token_id)
        meta = await self._fetcher.fetch(chain_id, token_id.address, endpoint)
        token = Token(
            token_id,
            meta.name,
            meta.symbol,
            meta.decimals,
            EvmTokenDetails.from_account_id(token_id),
        )
        try:
            await asyncio.to_thread(self._tokens_repo.save, token)
        except ConflictError:
            logger.warning("Token %s was saved concurrently, reading it back", token_id)
            saved_token = await asyncio.to_thread(self._tokens_repo.get, token_id)
            if not saved_token:
                raise RepositoryError(f"Token {token_id} conflicted but isn't stored")
            return saved_token
        return token

    def clear_cache(self):
        """
        Delete all cached entries
        """
        self._tokens_repo.purge()
