"""
Abstract Storage Interface

DESIGN DECISION: Services depend on these two ABCs only. MongoDB, Google
Sheets and the in-memory store (used by the test suite) all implement
them, so switching STORAGE_BACKEND touches no service code.

Only the lookups the auth, CRUD and statistics services perform are
here; there is no general query API.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from finance_tracker.models.stats import DateRange
from finance_tracker.models.transaction import Transaction
from finance_tracker.models.user import User


class UserStorageInterface(ABC):
    """
    Abstract interface for the credential store.

    Emails are unique across all users.
    """

    async def connect(self) -> None:
        """Prepare the backend (indexes, sheets). Called once at startup."""

    async def close(self) -> None:
        """Release backend resources. Called once at shutdown."""

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateError: If the email is already registered
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """Return the user, or None if no such user exists."""
        pass

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Return the user with this (normalized) email, or None."""
        pass

    @abstractmethod
    async def update_user(self, user: User) -> User:
        """
        Replace a stored user with the given one.

        Raises:
            RecordNotFoundError: If the user doesn't exist
            DuplicateError: If the new email belongs to another user
        """
        pass

    @abstractmethod
    async def delete_user(self, user_id: UUID) -> bool:
        """Delete a user. Returns False if there was nothing to delete."""
        pass


class TransactionStorageInterface(ABC):
    """
    Abstract interface for the transaction store.

    Storage does not enforce ownership; callers filter by user_id and
    check the owner of anything loaded by id.
    """

    async def connect(self) -> None:
        """Prepare the backend (indexes, sheets). Called once at startup."""

    async def close(self) -> None:
        """Release backend resources. Called once at shutdown."""

    @abstractmethod
    async def save_transaction(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        pass

    @abstractmethod
    async def get_transaction_by_id(
        self,
        transaction_id: UUID,
    ) -> Optional[Transaction]:
        """Return the transaction regardless of owner, or None."""
        pass

    @abstractmethod
    async def update_transaction(self, transaction: Transaction) -> Transaction:
        """
        Replace a stored transaction with the given one.

        Raises:
            RecordNotFoundError: If the transaction doesn't exist
        """
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: UUID) -> bool:
        """Delete a transaction. Returns False if there was nothing to delete."""
        pass

    @abstractmethod
    async def list_transactions(
        self,
        user_id: UUID,
        date_range: Optional[DateRange] = None,
    ) -> list[Transaction]:
        """
        List a user's transactions, newest first.

        Args:
            user_id: Owner to filter on
            date_range: Inclusive bounds on the transaction date; None for all

        Returns:
            Matching transactions sorted by date descending
        """
        pass

    @abstractmethod
    async def delete_transactions_for_user(self, user_id: UUID) -> int:
        """Delete every transaction the user owns. Returns how many went."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class RecordNotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


def newest_first(transactions: list[Transaction]) -> list[Transaction]:
    """Sort by date descending, most recently created first on ties."""
    return sorted(
        transactions,
        key=lambda t: (t.date, t.created_at),
        reverse=True,
    )
