"""
In-Memory Storage Implementation

Used for local development and for the test suite. Data lives for the
lifetime of the process only. Records are copied in and out so callers
can never mutate stored state by accident.
"""

from typing import Optional
from uuid import UUID

from finance_tracker.models.stats import DateRange
from finance_tracker.models.transaction import Transaction
from finance_tracker.models.user import User
from finance_tracker.services.storage.interface import (
    DuplicateError,
    RecordNotFoundError,
    TransactionStorageInterface,
    UserStorageInterface,
    newest_first,
)


class InMemoryUserStorage(UserStorageInterface):
    """Dictionary-backed credential store."""

    def __init__(self):
        self._users: dict[UUID, User] = {}

    def _email_taken(self, email: str, exclude: Optional[UUID] = None) -> bool:
        return any(
            u.email == email and u.id != exclude
            for u in self._users.values()
        )

    async def create_user(self, user: User) -> User:
        if self._email_taken(user.email):
            raise DuplicateError(f"Email already registered: {user.email}")
        self._users[user.id] = user.model_copy(deep=True)
        return user

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def update_user(self, user: User) -> User:
        if user.id not in self._users:
            raise RecordNotFoundError(f"User not found: {user.id}")
        if self._email_taken(user.email, exclude=user.id):
            raise DuplicateError(f"Email already registered: {user.email}")
        self._users[user.id] = user.model_copy(deep=True)
        return user

    async def delete_user(self, user_id: UUID) -> bool:
        return self._users.pop(user_id, None) is not None


class InMemoryTransactionStorage(TransactionStorageInterface):
    """Dictionary-backed transaction store."""

    def __init__(self):
        self._transactions: dict[UUID, Transaction] = {}

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        self._transactions[transaction.id] = transaction.model_copy(deep=True)
        return transaction

    async def get_transaction_by_id(
        self,
        transaction_id: UUID,
    ) -> Optional[Transaction]:
        transaction = self._transactions.get(transaction_id)
        return transaction.model_copy(deep=True) if transaction else None

    async def update_transaction(self, transaction: Transaction) -> Transaction:
        if transaction.id not in self._transactions:
            raise RecordNotFoundError(f"Transaction not found: {transaction.id}")
        self._transactions[transaction.id] = transaction.model_copy(deep=True)
        return transaction

    async def delete_transaction(self, transaction_id: UUID) -> bool:
        return self._transactions.pop(transaction_id, None) is not None

    async def list_transactions(
        self,
        user_id: UUID,
        date_range: Optional[DateRange] = None,
    ) -> list[Transaction]:
        date_range = date_range or DateRange()
        matches = [
            t.model_copy(deep=True)
            for t in self._transactions.values()
            if t.user_id == user_id and date_range.contains(t.date)
        ]
        return newest_first(matches)

    async def delete_transactions_for_user(self, user_id: UUID) -> int:
        doomed = [tid for tid, t in self._transactions.items() if t.user_id == user_id]
        for tid in doomed:
            del self._transactions[tid]
        return len(doomed)
