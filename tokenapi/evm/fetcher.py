from __future__ import annotations
import asyncio
import json
import logging
import os
from typing import Any, Callable, Dict, List, Tuple
from aiohttp import ClientError
from eth_abi.exceptions import DecodingError
from eth_utils import function_abi_to_4byte_selector, to_checksum_address
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import Web3Exception

from tokenapi.core import Core
from tokenapi.errors import BatchReadFailed, ChainConnectError, ChainIdMismatch
from tokenapi.evm.erc20_metadata import ERC20Metadata

logger = logging.getLogger(__name__)

#: Functions read from the token contract, in the order of the batch
METADATA_FUNCTIONS = ("name", "symbol", "decimals")

_TRANSPORT_ERRORS = (Web3Exception, ClientError, OSError, asyncio.TimeoutError)
_READ_ERRORS = _TRANSPORT_ERRORS + (DecodingError, ValueError)


def async_web3(endpoint: str) -> AsyncWeb3:
    """
    Default factory for :class:`web3.AsyncWeb3` connected to ``endpoint``
    """
    return AsyncWeb3(AsyncHTTPProvider(endpoint))


class ERC20MetasFetcher(Core):
    """
    Reads ERC20 metadata (name, symbol, decimals) straight from the
    blockchain. There's no caching here, see
    :class:`tokenapi.tokens.TokensService` for that.

    All three fields are read with a single ``eth_call`` to the
    `Multicall3 <https://www.multicall3.com/>`_ contract's ``aggregate3``
    with ``allowFailure = false``. So the read either returns all fields
    from the same block or fails as a whole.

    **Request/Response flow**

    ::

                +-------------------+                     +------------+
                | ERC20MetasFetcher |                     | Web3 (RPC) |
                +-------------------+                     +------------+
        ------------------  |                                   |
        | Fetch metadata |-|                                    |
        |----------------| |                                    |
                           | Check connection                   |
                           |----------------------------------->|
                           |                                    |
                           | eth_chainId                        |
                           |----------------------------------->|
                           |                                    |
                           | If chain id matches:               |
                           | aggregate3(name, symbol, decimals) |
                           |----------------------------------->|
            -------------  |                                    |
            | Metadata  |-|                                     |
            |-----------| |                                     |

    Args:
        w3_factory: Creates :class:`web3.AsyncWeb3` for an endpoint url
        kwargs: Args for the :class:`tokenapi.core.Core`
    """

    _erc20_abi: List[Dict[str, Any]]
    _multicall_abi: List[Dict[str, Any]]
    _w3_factory: Callable[[str], AsyncWeb3]

    def __init__(
        self, w3_factory: Callable[[str], AsyncWeb3] | None = None, **kwargs
    ):
        super().__init__(**kwargs)
        current_folder = os.path.realpath(os.path.dirname(__file__))
        with open(f"{current_folder}/erc20_abi.json", "r", encoding="utf-8") as f:
            self._erc20_abi = json.load(f)
        with open(f"{current_folder}/multicall3_abi.json", "r", encoding="utf-8") as f:
            self._multicall_abi = json.load(f)
        self._w3_factory = w3_factory or async_web3
        # Fail on a bad Multicall3 address here rather than on every fetch
        self.multicall_address

    async def fetch(self, chain_id: int, address: str, endpoint: str) -> ERC20Metadata:
        """
        Fetch metadata of the token at ``address``.

        Args:
            chain_id: expected EVM chain id of the endpoint
            address: token contract address
            endpoint: RPC endpoint url

        Returns:
            Fetched :class:`ERC20Metadata`

        Raises:
            ChainConnectError: if the endpoint can't be reached
            ChainIdMismatch: if the endpoint is on a different chain
            BatchReadFailed: if the batched contract read failed
        """
        w3 = self._w3_factory(endpoint)
        try:
            await self._check_chain_id(w3, chain_id, endpoint)
            return await self._read_metadata(w3, address)
        finally:
            await self._disconnect(w3, endpoint)

    async def _disconnect(self, w3: AsyncWeb3, endpoint: str):
        try:
            await w3.provider.disconnect()
        except _TRANSPORT_ERRORS as e:
            logger.warning("Failed to close connection to %s: %s", endpoint, e)

    async def _check_chain_id(self, w3: AsyncWeb3, chain_id: int, endpoint: str):
        try:
            connected = await w3.is_connected()
            actual = await w3.eth.chain_id if connected else None
        except _TRANSPORT_ERRORS as e:
            raise ChainConnectError(f"Failed to connect to {endpoint}: {e}") from e
        if not connected:
            raise ChainConnectError(f"Failed to connect to {endpoint}")
        if actual != chain_id:
            logger.warning(
                "Endpoint %s reports chain id %s, expected %s", endpoint, actual, chain_id
            )
            raise ChainIdMismatch(chain_id, actual)

    async def _read_metadata(self, w3: AsyncWeb3, address: str) -> ERC20Metadata:
        target = to_checksum_address(address)
        multicall = w3.eth.contract(
            address=self.multicall_address, abi=self._multicall_abi
        )
        calls = [(target, False, self._calldata(fn)) for fn in METADATA_FUNCTIONS]
        try:
            results = await multicall.functions.aggregate3(calls).call()
            if len(results) != len(METADATA_FUNCTIONS):
                raise BatchReadFailed(f"Unexpected multicall response for {target}")
            # decimals are decoded as uint8, so anything above 255 fails here
            name, symbol, decimals = [
                self._decode(w3, fn, result)
                for fn, result in zip(METADATA_FUNCTIONS, results)
            ]
        except _READ_ERRORS as e:
            raise BatchReadFailed(f"Failed to read metadata of {target}: {e}") from e
        return ERC20Metadata(name, symbol, decimals)

    def _calldata(self, fn_name: str) -> bytes:
        return function_abi_to_4byte_selector(self._abi_entry(fn_name))

    def _decode(self, w3: AsyncWeb3, fn_name: str, result: Tuple[bool, bytes]) -> Any:
        success, data = result
        if not success:
            raise BatchReadFailed(f"Call to {fn_name}() failed")
        types = [output["type"] for output in self._abi_entry(fn_name)["outputs"]]
        return w3.codec.decode(types, data)[0]

    def _abi_entry(self, fn_name: str) -> Dict[str, Any]:
        return next(e for e in self._erc20_abi if e.get("name") == fn_name)
