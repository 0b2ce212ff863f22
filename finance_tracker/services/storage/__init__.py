"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
MongoDB is the document-store backend; Google Sheets and in-memory
implementations follow the same interfaces and can be swapped in via
configuration.
"""

from finance_tracker.services.storage.interface import (
    DuplicateError,
    RecordNotFoundError,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
    UserStorageInterface,
)
from finance_tracker.services.storage.memory import (
    InMemoryTransactionStorage,
    InMemoryUserStorage,
)
from finance_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    GoogleSheetsUserStorage,
)
from finance_tracker.services.storage.mongodb import (
    MongoDatabase,
    MongoTransactionStorage,
    MongoUserStorage,
)

__all__ = [
    # Interfaces
    "TransactionStorageInterface",
    "UserStorageInterface",
    # Exceptions
    "DuplicateError",
    "RecordNotFoundError",
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryTransactionStorage",
    "InMemoryUserStorage",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStorage",
    "GoogleSheetsUserStorage",
    # MongoDB implementation
    "MongoDatabase",
    "MongoTransactionStorage",
    "MongoUserStorage",
]
