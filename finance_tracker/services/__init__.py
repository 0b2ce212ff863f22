"""Services package."""

from finance_tracker.services.storage import (
    DuplicateError,
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    GoogleSheetsUserStorage,
    InMemoryTransactionStorage,
    InMemoryUserStorage,
    MongoDatabase,
    MongoTransactionStorage,
    MongoUserStorage,
    RecordNotFoundError,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
    UserStorageInterface,
)

__all__ = [
    "DuplicateError",
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStorage",
    "GoogleSheetsUserStorage",
    "InMemoryTransactionStorage",
    "InMemoryUserStorage",
    "MongoDatabase",
    "MongoTransactionStorage",
    "MongoUserStorage",
    "RecordNotFoundError",
    "StorageConnectionError",
    "StorageError",
    "TransactionStorageInterface",
    "UserStorageInterface",
]
