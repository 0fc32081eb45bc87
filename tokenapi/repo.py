"""
Base class for repos used in :mod:`tokenapi`.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from tokenapi.account_ids import AccountId

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """
    Storage for records keyed by :class:`tokenapi.account_ids.AccountId`.

    Implementations only care about durability of the records they're
    given, cross-field consistency is up to the caller.

    Examples:

        ::

            class Widgets(Repository[Widget]):
                def get(self, id: AccountId) -> Widget | None:
                    ...

                def save(self, record: Widget):
                    ...
    """

    @abstractmethod
    def get(self, id: AccountId) -> T | None:
        """
        Find a record by id.

        Args:
            id: record id

        Returns:
            The record or ``None`` if not found

        Raises:
            tokenapi.errors.RepositoryError: if the backend failed or the stored record is corrupt
        """

    @abstractmethod
    def save(self, record: T):
        """
        Insert a new record.

        Args:
            record: record to save

        Raises:
            tokenapi.errors.ConflictError: if a record with the same id already exists
            tokenapi.errors.RepositoryError: if the backend failed
        """
