from __future__ import annotations
import re
from typing import Callable, Dict, Tuple
from eth_utils import to_checksum_address

from tokenapi.errors import IdentifierError

#: Namespace for EVM chains
EVM_NAMESPACE = "eip155"

_NAMESPACE_RE = re.compile(r"[-a-z0-9]{3,8}")
_REFERENCE_RE = re.compile(r"[-_a-zA-Z0-9]{1,32}")
_ADDRESS_RE = re.compile(r"[-.%a-zA-Z0-9]{1,128}")

_EVM_REFERENCE_RE = re.compile(r"[1-9][0-9]{0,31}")
_EVM_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")


def _evm_reference(reference: str) -> str:
    if not _EVM_REFERENCE_RE.fullmatch(reference):
        raise IdentifierError(f"Invalid eip155 chain reference `{reference}`")
    return reference


def _evm_address(address: str) -> str:
    if not _EVM_ADDRESS_RE.fullmatch(address):
        raise IdentifierError(f"Invalid eip155 address `{address}`")
    try:
        return to_checksum_address(address)
    except ValueError as e:
        raise IdentifierError(f"Invalid eip155 address `{address}`") from e


# Namespace specific normalizers. A namespace missing here only gets
# the generic grammar check.
_REFERENCE_NORMALIZERS: Dict[str, Callable[[str], str]] = {
    EVM_NAMESPACE: _evm_reference,
}
_ADDRESS_NORMALIZERS: Dict[str, Callable[[str], str]] = {
    EVM_NAMESPACE: _evm_address,
}


class ChainId:
    """
    `CAIP-2 <https://chainagnostic.org/CAIPs/caip-2>`_ blockchain id,
    serialized as ``namespace:reference``.

    Use :meth:`build` or :meth:`parse` to get a validated instance.
    """

    #: Chain namespace, e.g. ``eip155``
    namespace: str
    #: Chain reference within the namespace, e.g. ``1``
    reference: str

    def __init__(self, namespace: str, reference: str):
        self.namespace = namespace
        self.reference = reference

    @staticmethod
    def build(namespace: str, reference: str) -> ChainId:
        """
        Validate and create a :class:`ChainId`

        Args:
            namespace: chain namespace
            reference: chain reference

        Returns:
            An instance of :class:`ChainId`

        Raises:
            IdentifierError: if namespace or reference are malformed
        """
        if not namespace or not _NAMESPACE_RE.fullmatch(namespace):
            raise IdentifierError(f"Invalid chain namespace `{namespace}`")
        if not reference or not _REFERENCE_RE.fullmatch(reference):
            raise IdentifierError(f"Invalid chain reference `{reference}`")
        normalize = _REFERENCE_NORMALIZERS.get(namespace)
        if normalize:
            reference = normalize(reference)
        return ChainId(namespace, reference)

    @staticmethod
    def parse(text: str) -> ChainId:
        """
        Parse ``namespace:reference`` string

        Raises:
            IdentifierError: if ``text`` is not a valid chain id
        """
        parts = text.split(":")
        if len(parts) != 2:
            raise IdentifierError(f"Malformed chain id `{text}`")
        return ChainId.build(*parts)

    def __str__(self):
        return f"{self.namespace}:{self.reference}"

    def __eq__(self, other):
        if type(other) is type(self):
            return self.to_tuple() == other.to_tuple()
        return False

    def __hash__(self):
        return hash(self.to_tuple())

    def __repr__(self):
        return f"ChainId({str(self)})"

    def to_tuple(self) -> Tuple[str, str]:
        return (self.namespace, self.reference)


class AccountId:
    """
    `CAIP-10 <https://chainagnostic.org/CAIPs/caip-10>`_ account id,
    serialized as ``namespace:reference:address``.

    The address is normalized on construction, so two requests for the
    same account always produce the same id. For ``eip155`` that is the
    EIP-55 checksum form.

    Examples:
        ::

            usdc = AccountId.build("eip155", "1", "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48")
            str(usdc)
            # => eip155:1:0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48
            AccountId.parse(str(usdc)) == usdc
            # => True
    """

    #: CAIP-2 chain id
    chain_id: ChainId
    #: Normalized account address
    address: str

    def __init__(self, chain_id: ChainId, address: str):
        self.chain_id = chain_id
        self.address = address

    @staticmethod
    def build(namespace: str, reference: str, address: str) -> AccountId:
        """
        Validate and create an :class:`AccountId`

        Args:
            namespace: chain namespace, e.g. ``eip155``
            reference: chain reference, e.g. ``1``
            address: account address in any accepted casing

        Returns:
            An instance of :class:`AccountId`

        Raises:
            IdentifierError: if any of the parts is malformed
        """
        chain_id = ChainId.build(namespace, reference)
        return AccountId.from_chain_id(chain_id, address)

    @staticmethod
    def from_chain_id(chain_id: ChainId, address: str) -> AccountId:
        """
        Create an :class:`AccountId` on an already validated :class:`ChainId`

        Raises:
            IdentifierError: if the address is malformed
        """
        if not address or not _ADDRESS_RE.fullmatch(address):
            raise IdentifierError(f"Invalid account address `{address}`")
        normalize = _ADDRESS_NORMALIZERS.get(chain_id.namespace)
        if normalize:
            address = normalize(address)
        return AccountId(chain_id, address)

    @staticmethod
    def parse(text: str) -> AccountId:
        """
        Parse ``namespace:reference:address`` string

        Raises:
            IdentifierError: if ``text`` is not a valid account id
        """
        parts = text.split(":")
        if len(parts) != 3:
            raise IdentifierError(f"Malformed account id `{text}`")
        return AccountId.build(*parts)

    @property
    def namespace(self) -> str:
        return self.chain_id.namespace

    @property
    def reference(self) -> str:
        return self.chain_id.reference

    def __str__(self):
        return f"{self.chain_id}:{self.address}"

    def __eq__(self, other):
        if type(other) is type(self):
            return self.to_tuple() == other.to_tuple()
        return False

    def __hash__(self):
        return hash(self.to_tuple())

    def __repr__(self):
        return f"AccountId({str(self)})"

    def to_tuple(self) -> Tuple[str, str, str]:
        return (self.chain_id.namespace, self.chain_id.reference, self.address)
