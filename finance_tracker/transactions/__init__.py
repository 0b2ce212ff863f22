"""Transaction CRUD package."""

from finance_tracker.transactions.service import TransactionService

__all__ = ["TransactionService"]
