"""
MongoDB Storage Implementation

The document-store backend. Users and transactions each live in their
own collection; ids are stored as UUID strings in `_id` and amounts as
Decimal128 so no precision is lost on the way through.

Indexes (created at startup):
- users: unique on email
- transactions: (user_id, date descending), matching the list order
"""

from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from bson.decimal128 import Decimal128
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from finance_tracker.config import MongoSettings, get_settings
from finance_tracker.models.stats import DateRange
from finance_tracker.models.transaction import Transaction, TransactionType
from finance_tracker.models.user import User
from finance_tracker.services.storage.interface import (
    DuplicateError,
    RecordNotFoundError,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
    UserStorageInterface,
)


class MongoDatabase:
    """Owns the motor client shared by both Mongo storages."""

    def __init__(
        self,
        settings: Optional[MongoSettings] = None,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        self._settings = settings or get_settings().mongo
        self._client = client or AsyncIOMotorClient(self._settings.uri)
        self._db = self._client[self._settings.database]

    @property
    def users(self):
        return self._db[self._settings.users_collection]

    @property
    def transactions(self):
        return self._db[self._settings.transactions_collection]

    async def ping(self) -> None:
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            raise StorageConnectionError(f"Failed to connect to MongoDB: {e}")

    def close(self) -> None:
        self._client.close()


def user_to_document(user: User) -> dict[str, Any]:
    return {
        "_id": str(user.id),
        "name": user.name,
        "email": user.email,
        "password_hash": user.password_hash,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def document_to_user(doc: dict[str, Any]) -> User:
    return User(
        id=UUID(doc["_id"]),
        name=doc["name"],
        email=doc["email"],
        password_hash=doc["password_hash"],
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def transaction_to_document(transaction: Transaction) -> dict[str, Any]:
    return {
        "_id": str(transaction.id),
        "user_id": str(transaction.user_id),
        "type": transaction.type.value,
        "amount": Decimal128(str(transaction.amount)),
        "category": transaction.category,
        "note": transaction.note,
        "date": transaction.date,
        "created_at": transaction.created_at,
        "updated_at": transaction.updated_at,
    }


def document_to_transaction(doc: dict[str, Any]) -> Transaction:
    amount = doc["amount"]
    if isinstance(amount, Decimal128):
        amount = amount.to_decimal()
    return Transaction(
        id=UUID(doc["_id"]),
        user_id=UUID(doc["user_id"]),
        type=TransactionType(doc["type"]),
        amount=Decimal(str(amount)),
        category=doc["category"],
        note=doc.get("note"),
        date=doc["date"],
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


class MongoUserStorage(UserStorageInterface):
    """MongoDB implementation of the credential store."""

    def __init__(self, database: MongoDatabase):
        self._database = database

    async def connect(self) -> None:
        await self._database.ping()
        await self._database.users.create_index("email", unique=True)

    async def close(self) -> None:
        self._database.close()

    async def create_user(self, user: User) -> User:
        try:
            await self._database.users.insert_one(user_to_document(user))
            return user
        except DuplicateKeyError:
            raise DuplicateError(f"Email already registered: {user.email}")
        except PyMongoError as e:
            raise StorageError(f"Failed to save user: {e}")

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        return await self._find_one({"_id": str(user_id)})

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self._find_one({"email": email})

    async def _find_one(self, query: dict) -> Optional[User]:
        try:
            doc = await self._database.users.find_one(query)
        except PyMongoError as e:
            raise StorageError(f"Failed to get user: {e}")
        return document_to_user(doc) if doc else None

    async def update_user(self, user: User) -> User:
        try:
            result = await self._database.users.replace_one(
                {"_id": str(user.id)},
                user_to_document(user),
            )
        except DuplicateKeyError:
            raise DuplicateError(f"Email already registered: {user.email}")
        except PyMongoError as e:
            raise StorageError(f"Failed to update user: {e}")
        if result.matched_count == 0:
            raise RecordNotFoundError(f"User not found: {user.id}")
        return user

    async def delete_user(self, user_id: UUID) -> bool:
        try:
            result = await self._database.users.delete_one({"_id": str(user_id)})
        except PyMongoError as e:
            raise StorageError(f"Failed to delete user: {e}")
        return result.deleted_count > 0


class MongoTransactionStorage(TransactionStorageInterface):
    """MongoDB implementation of the transaction store."""

    def __init__(self, database: MongoDatabase):
        self._database = database

    async def connect(self) -> None:
        await self._database.transactions.create_index(
            [("user_id", ASCENDING), ("date", DESCENDING)]
        )

    async def close(self) -> None:
        self._database.close()

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        try:
            await self._database.transactions.insert_one(
                transaction_to_document(transaction)
            )
            return transaction
        except PyMongoError as e:
            raise StorageError(f"Failed to save transaction: {e}")

    async def get_transaction_by_id(
        self,
        transaction_id: UUID,
    ) -> Optional[Transaction]:
        try:
            doc = await self._database.transactions.find_one(
                {"_id": str(transaction_id)}
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to get transaction: {e}")
        return document_to_transaction(doc) if doc else None

    async def update_transaction(self, transaction: Transaction) -> Transaction:
        try:
            result = await self._database.transactions.replace_one(
                {"_id": str(transaction.id)},
                transaction_to_document(transaction),
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to update transaction: {e}")
        if result.matched_count == 0:
            raise RecordNotFoundError(f"Transaction not found: {transaction.id}")
        return transaction

    async def delete_transaction(self, transaction_id: UUID) -> bool:
        try:
            result = await self._database.transactions.delete_one(
                {"_id": str(transaction_id)}
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to delete transaction: {e}")
        return result.deleted_count > 0

    async def list_transactions(
        self,
        user_id: UUID,
        date_range: Optional[DateRange] = None,
    ) -> list[Transaction]:
        query: dict[str, Any] = {"user_id": str(user_id)}
        if date_range is not None and not date_range.is_unbounded:
            query["date"] = {}
            if date_range.start is not None:
                query["date"]["$gte"] = date_range.start
            if date_range.end is not None:
                query["date"]["$lte"] = date_range.end

        try:
            cursor = self._database.transactions.find(query).sort(
                [("date", DESCENDING), ("created_at", DESCENDING)]
            )
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StorageError(f"Failed to list transactions: {e}")
        return [document_to_transaction(doc) for doc in docs]

    async def delete_transactions_for_user(self, user_id: UUID) -> int:
        try:
            result = await self._database.transactions.delete_many(
                {"user_id": str(user_id)}
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to delete transactions: {e}")
        return result.deleted_count
