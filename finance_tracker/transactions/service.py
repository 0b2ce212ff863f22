"""
Transaction Service

Create, read, update and delete for one user's transactions.

Every operation takes the caller's AuthContext. A transaction is only
ever read or changed after get_owned() has confirmed the caller owns it.
"""

from typing import Optional
from uuid import UUID

from finance_tracker.audit import AuditLogger
from finance_tracker.auth import AuthContext
from finance_tracker.errors import NotFoundError, OwnershipError, ValidationError
from finance_tracker.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionPatch,
    apply_patch,
    build_transaction,
)
from finance_tracker.services.storage import (
    RecordNotFoundError,
    TransactionStorageInterface,
)
from finance_tracker.validation import TransactionValidator


NOT_FOUND_MESSAGE = "Transaction not found"
FORBIDDEN_MESSAGE = "Not authorized to access this transaction"
DELETED_MESSAGE = "Transaction deleted"


class TransactionService:
    """Owner-scoped transaction CRUD."""

    def __init__(
        self,
        storage: TransactionStorageInterface,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger

    async def list_for_user(self, ctx: AuthContext) -> list[Transaction]:
        """All of the caller's transactions, newest first."""
        return await self._storage.list_transactions(ctx.user_id)

    async def create(
        self,
        ctx: AuthContext,
        draft: TransactionDraft,
    ) -> Transaction:
        """
        Validate and store a new transaction owned by the caller.

        Nothing is persisted if validation fails.
        """
        result = self._validator.validate_draft(draft)
        if not result.is_valid:
            raise ValidationError(result.first_message)

        transaction = build_transaction(draft, ctx.user_id)
        saved = await self._storage.save_transaction(transaction)

        if self._audit_logger:
            await self._audit_logger.log_transaction_created(
                user_id=ctx.user_id,
                transaction_id=saved.id,
                transaction_type=saved.type.value,
                amount=str(saved.amount),
            )

        return saved

    async def get_owned(
        self,
        ctx: AuthContext,
        transaction_id: str,
    ) -> Transaction:
        """
        Resolve a transaction id from a request path.

        Raises:
            NotFoundError: If the id is malformed or unknown
            OwnershipError: If the transaction belongs to someone else
        """
        try:
            parsed_id = UUID(transaction_id)
        except ValueError:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        transaction = await self._storage.get_transaction_by_id(parsed_id)
        if transaction is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        if transaction.user_id != ctx.user_id:
            if self._audit_logger:
                await self._audit_logger.log_access_denied(
                    ctx.user_id, "transaction", transaction.id
                )
            raise OwnershipError(FORBIDDEN_MESSAGE)

        return transaction

    async def update(
        self,
        ctx: AuthContext,
        transaction: Transaction,
        patch: TransactionPatch,
    ) -> Transaction:
        """Apply a partial update to a transaction the caller owns."""
        result = self._validator.validate_patch(patch)
        if not result.is_valid:
            raise ValidationError(result.first_message)

        updated = apply_patch(transaction, patch)
        try:
            saved = await self._storage.update_transaction(updated)
        except RecordNotFoundError:
            # Deleted between the ownership check and the write
            raise NotFoundError(NOT_FOUND_MESSAGE)

        if self._audit_logger:
            await self._audit_logger.log_transaction_updated(
                ctx.user_id, saved.id, sorted(patch.provided_fields)
            )

        return saved

    async def delete(self, ctx: AuthContext, transaction: Transaction) -> str:
        """Delete a transaction the caller owns. Returns the confirmation message."""
        deleted = await self._storage.delete_transaction(transaction.id)
        if not deleted:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        if self._audit_logger:
            await self._audit_logger.log_transaction_deleted(ctx.user_id, transaction.id)

        return DELETED_MESSAGE
