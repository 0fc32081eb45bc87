"""
Errors raised by :mod:`tokenapi`.

Every error carries a ``kind`` that the transport layer maps to an
externally visible status, and a ``retryable`` flag.

+------------------------------------+---------------------+-----------+
| Error                              | Kind                | Retryable |
+====================================+=====================+===========+
| :class:`IdentifierError`           | identifier          | no        |
+------------------------------------+---------------------+-----------+
| :class:`RepositoryError`           | repository          | yes       |
+------------------------------------+---------------------+-----------+
| :class:`ConflictError`             | conflict            | yes       |
+------------------------------------+---------------------+-----------+
| :class:`ChainConnectError`         | chain_connect       | yes       |
+------------------------------------+---------------------+-----------+
| :class:`ChainIdMismatch`           | chain_id_mismatch   | no        |
+------------------------------------+---------------------+-----------+
| :class:`BatchReadFailed`           | batch_read_failed   | no        |
+------------------------------------+---------------------+-----------+
"""


class TokenApiError(Exception):
    """
    Base class for all :mod:`tokenapi` errors
    """

    kind: str = "token_api"
    retryable: bool = False


class IdentifierError(TokenApiError, ValueError):
    """
    Malformed chain reference, namespace or address.
    """

    kind = "identifier"


class RepositoryError(TokenApiError):
    """
    Storage backend is unavailable or a stored row is corrupt.
    """

    kind = "repository"
    retryable = True


class ConflictError(RepositoryError):
    """
    A record with the same id is already stored.

    Note:
        :class:`tokenapi.tokens.TokensService` reconciles this error and
        never lets it reach the caller.
    """

    kind = "conflict"


class ChainConnectError(TokenApiError):
    """
    The RPC endpoint could not be reached.
    """

    kind = "chain_connect"
    retryable = True


class ChainIdMismatch(TokenApiError):
    """
    The RPC endpoint reports a different chain than requested.

    Args:
        expected: chain id requested by the caller
        actual: chain id reported by the endpoint
    """

    kind = "chain_id_mismatch"

    #: Chain id requested by the caller
    expected: int
    #: Chain id reported by the endpoint
    actual: int

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected chain id {expected}, endpoint reports {actual}")
        self.expected = expected
        self.actual = actual


class BatchReadFailed(TokenApiError):
    """
    The batched contract read failed as a whole, e.g. the address is not
    an ERC20 token.
    """

    kind = "batch_read_failed"
