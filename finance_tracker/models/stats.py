"""
Statistics Models

Output shapes of the aggregation. Every numeric field is always present;
a category or month that only saw one type reports zero for the other.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator

from finance_tracker.models.base import CamelModel, Money


ZERO = Decimal("0")


class DateRange(CamelModel):
    """
    Inclusive range over transaction dates.

    Either bound may be absent, meaning unbounded on that side.
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start and self.end and self.start > self.end:
            raise ValueError("startDate must not be after endDate")
        return self

    def contains(self, moment: datetime) -> bool:
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None


class Summary(CamelModel):
    total_income: Money = ZERO
    total_expense: Money = ZERO
    net_balance: Money = ZERO


class CategoryStat(CamelModel):
    category: str
    income: Money = ZERO
    expense: Money = ZERO
    total: Money = ZERO


class MonthlyStat(CamelModel):
    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    income: Money = ZERO
    expense: Money = ZERO
    balance: Money = ZERO


class MonthlyTrendPoint(CamelModel):
    month: str
    balance: Money = ZERO


class TransactionStats(CamelModel):
    """Full response of the stats endpoint."""

    summary: Summary = Field(default_factory=Summary)
    category_data: list[CategoryStat] = Field(default_factory=list)
    monthly_data: list[MonthlyStat] = Field(default_factory=list)
    top_categories: list[CategoryStat] = Field(default_factory=list)
    monthly_trend: list[MonthlyTrendPoint] = Field(default_factory=list)
