"""
Application Wiring for Finance Tracker

This module ties together all the components the HTTP layer needs:
1. Storage (users + transactions) for the configured backend
2. Auth (tokens, password hashing, the token gate)
3. Transaction CRUD and statistics services
4. Audit logging

DESIGN DECISION: Everything is built by one factory and handed to the
API as a single bundle. Tests build the same bundle over in-memory
storage, so no code path differs between tests and production except
the storage backend itself.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.auth import AuthService, PasswordHasher, TokenService
from finance_tracker.config import AuthSettings, get_settings
from finance_tracker.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    GoogleSheetsUserStorage,
    InMemoryTransactionStorage,
    InMemoryUserStorage,
    MongoDatabase,
    MongoTransactionStorage,
    MongoUserStorage,
    TransactionStorageInterface,
    UserStorageInterface,
)
from finance_tracker.stats import StatisticsService
from finance_tracker.transactions import TransactionService
from finance_tracker.validation import TransactionValidator


logger = structlog.get_logger("finance_tracker.orchestrator")


@dataclass
class AppComponents:
    """Everything a request handler can reach."""

    user_storage: UserStorageInterface
    transaction_storage: TransactionStorageInterface
    auth_service: AuthService
    transaction_service: TransactionService
    statistics_service: StatisticsService
    audit_logger: AuditLogger
    storage_backend: str = "memory"

    async def startup(self) -> None:
        """Open storage connections. Fails fast if the backend is unreachable."""
        await self.user_storage.connect()
        await self.transaction_storage.connect()
        logger.info("storage_connected", backend=self.storage_backend)

    async def shutdown(self) -> None:
        await self.transaction_storage.close()
        await self.user_storage.close()
        logger.info("storage_closed", backend=self.storage_backend)


def _create_storage(
    backend: str,
) -> tuple[UserStorageInterface, TransactionStorageInterface]:
    if backend == "mongodb":
        database = MongoDatabase()
        return MongoUserStorage(database), MongoTransactionStorage(database)

    if backend == "google_sheets":
        sheets_client = GoogleSheetsClient()
        return (
            GoogleSheetsUserStorage(sheets_client),
            GoogleSheetsTransactionStorage(sheets_client),
        )

    return InMemoryUserStorage(), InMemoryTransactionStorage()


def create_app_components(
    storage_backend: Optional[str] = None,
    auth_settings: Optional[AuthSettings] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        storage_backend: "memory", "mongodb" or "google_sheets".
                         Defaults to STORAGE_BACKEND.
        auth_settings: Override for AUTH_* settings (tests pass a
                       low bcrypt cost here).
    """
    settings = get_settings()
    backend = storage_backend or settings.app.storage_backend
    auth_settings = auth_settings or settings.auth

    user_storage, transaction_storage = _create_storage(backend)
    audit_logger = AuditLogger()

    auth_service = AuthService(
        user_storage=user_storage,
        transaction_storage=transaction_storage,
        settings=auth_settings,
        tokens=TokenService(auth_settings),
        passwords=PasswordHasher(auth_settings.bcrypt_rounds),
        audit_logger=audit_logger,
    )

    transaction_service = TransactionService(
        storage=transaction_storage,
        validator=TransactionValidator(),
        audit_logger=audit_logger,
    )

    return AppComponents(
        user_storage=user_storage,
        transaction_storage=transaction_storage,
        auth_service=auth_service,
        transaction_service=transaction_service,
        statistics_service=StatisticsService(transaction_storage),
        audit_logger=audit_logger,
        storage_backend=backend,
    )
