"""
Transaction Models

A Transaction is a single income or expense record owned by exactly one
user. Incoming request bodies are parsed into loose input models
(TransactionDraft, TransactionPatch) whose fields are all optional; the
validator decides whether they are acceptable. Only a validated draft
becomes a Transaction.

DESIGN DECISION: Dates are naive wall-clock datetimes. An aware value
keeps its wall-clock fields and drops its offset; a bare YYYY-MM-DD means
midnight. Month grouping reads the stored year and month directly.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import Field, field_validator

from finance_tracker.models.base import CamelModel, Money, utcnow


SUGGESTED_CATEGORIES = [
    "Salary",
    "Freelance",
    "Investments",
    "Food",
    "Transportation",
    "Housing",
    "Utilities",
    "Entertainment",
    "Shopping",
    "Healthcare",
    "Education",
    "Other",
]


class TransactionType(str, Enum):
    """The two kinds of money movement we track."""
    INCOME = "income"
    EXPENSE = "expense"


def to_wall_clock(value: Any) -> Any:
    """
    Normalize a date-ish input to a naive datetime.

    Non-date values are passed through untouched so pydantic can
    report them.
    """
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return datetime.fromisoformat(text + "T00:00:00")
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).replace(tzinfo=None)
        except ValueError:
            return value
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return value


class Transaction(CamelModel):
    """
    A stored transaction.

    Ownership (user_id) is set at creation and never changes.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    user_id: UUID = Field(
        ...,
        description="Owner of this transaction"
    )
    type: TransactionType
    amount: Money = Field(
        ...,
        gt=0,
        description="Positive amount"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    date: datetime = Field(
        ...,
        description="When the transaction happened (naive wall-clock)"
    )

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return to_wall_clock(v)

    @property
    def month_key(self) -> str:
        """YYYY-MM key used for monthly grouping."""
        return f"{self.date.year:04d}-{self.date.month:02d}"


class _TransactionInput(CamelModel):
    """Loose shape shared by create and update bodies."""

    type: Optional[str] = None
    amount: Optional[Decimal] = None
    category: Optional[str] = None
    note: Optional[str] = None
    date: Optional[datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return to_wall_clock(v)


class TransactionDraft(_TransactionInput):
    """
    Body of a create request.

    Nothing here is trusted until TransactionValidator.validate_draft
    has passed it.
    """


class TransactionPatch(_TransactionInput):
    """
    Body of a partial update.

    Presence is tracked per field: a field counts as provided only if the
    client sent it, even when the value sent is null.
    """

    def is_set(self, field: str) -> bool:
        """Was this field present in the request?"""
        return field in self.model_fields_set

    @property
    def provided_fields(self) -> set[str]:
        return set(self.model_fields_set)


def build_transaction(
    draft: TransactionDraft,
    user_id: UUID,
) -> Transaction:
    """Turn a validated draft into a Transaction owned by user_id."""
    return Transaction(
        user_id=user_id,
        type=TransactionType(draft.type),
        amount=draft.amount,
        category=draft.category,
        note=draft.note or None,
        date=draft.date or utcnow(),
    )


def apply_patch(
    transaction: Transaction,
    patch: TransactionPatch,
) -> Transaction:
    """
    Merge a validated patch into a transaction.

    Only fields present in the patch change. The owner and id are never
    touched. Returns a new Transaction; the input is not mutated.
    """
    updates: dict[str, Any] = {}

    if patch.is_set("type"):
        updates["type"] = TransactionType(patch.type)
    if patch.is_set("amount"):
        updates["amount"] = patch.amount
    if patch.is_set("category"):
        updates["category"] = patch.category
    if patch.is_set("note"):
        updates["note"] = patch.note or None
    if patch.is_set("date"):
        updates["date"] = patch.date

    updates["updated_at"] = utcnow()

    merged = transaction.model_dump()
    merged.update(updates)
    return Transaction.model_validate(merged)
