from __future__ import annotations
import logging
import sqlite3

from tokenapi.account_ids import AccountId
from tokenapi.core import Core
from tokenapi.errors import ConflictError, RepositoryError
from tokenapi.repo import Repository
from tokenapi.tokens.token import Token

logger = logging.getLogger(__name__)


class TokensRepo(Repository[Token], Core):
    """
    Reading and writing :class:`Token` to database.

    Args:
        kwargs: Args for the :class:`tokenapi.core.Core`
    """

    def get(self, id: AccountId) -> Token | None:
        """
        Find a :class:`Token` by id.

        Args:
            id: CAIP-10 token id

        Returns:
            An instance of :class:`Token` or ``None`` if not found

        Raises:
            RepositoryError: if the database failed or the row is corrupt
        """
        logger.debug("Finding token by id %s", id)
        try:
            with self.pool.connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT * FROM evm_tokens WHERE id = ?", (str(id),))
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise RepositoryError(f"Failed to read token {id}: {e}") from e
        if not row:
            logger.debug("Token %s not found", id)
            return None
        try:
            return Token.from_row(row)
        except ValueError as e:
            raise RepositoryError(f"Corrupt row for token {id}: {e}") from e

    def save(self, record: Token):
        """
        Save :class:`Token` to database.

        Args:
            record: token to save

        Raises:
            ConflictError: if the token is already saved
            RepositoryError: if the database failed
        """
        try:
            row = record.to_row()
        except ValueError as e:
            raise RepositoryError(f"Can't store token {record.id}: {e}") from e
        logger.info("Saving token %s", record.id)
        try:
            with self.pool.connection() as conn:
                cursor = conn.cursor()
                cursor.execute("INSERT INTO evm_tokens VALUES(?,?,?,?,?,?)", row)
                conn.commit()
        except sqlite3.IntegrityError as e:
            if "UNIQUE" not in str(e):
                raise RepositoryError(f"Failed to save token {record.id}: {e}") from e
            raise ConflictError(f"Token {record.id} is already saved") from e
        except (sqlite3.Error, OverflowError) as e:
            raise RepositoryError(f"Failed to save token {record.id}: {e}") from e

    def purge(self):
        """
        Clean all database entries
        """
        try:
            with self.pool.connection() as conn:
                conn.execute("DELETE FROM evm_tokens")
                conn.commit()
        except sqlite3.Error as e:
            raise RepositoryError(f"Failed to purge tokens: {e}") from e
