"""
Statistics Aggregation

DESIGN DECISION: Aggregation is a PURE function of the transaction set.
Storage filters by owner and date range; compute_statistics() only sums.
The same set in any order gives the same output, because sums are Decimal
and every list is sorted by its key before it is returned.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

from finance_tracker.auth import AuthContext
from finance_tracker.models.stats import (
    ZERO,
    CategoryStat,
    MonthlyStat,
    MonthlyTrendPoint,
    Summary,
    TransactionStats,
)
from finance_tracker.models.transaction import Transaction, TransactionType
from finance_tracker.services.storage import TransactionStorageInterface
from finance_tracker.validation import parse_date_range


TOP_CATEGORY_COUNT = 5


def _split(transaction: Transaction) -> tuple[Decimal, Decimal]:
    """(income, expense) contribution of one transaction."""
    if transaction.type == TransactionType.INCOME:
        return transaction.amount, ZERO
    return ZERO, transaction.amount


def compute_statistics(transactions: Iterable[Transaction]) -> TransactionStats:
    """
    Summary, per-category and per-month breakdowns of a transaction set.

    The set is assumed to be already scoped to one user and date range.
    """
    total_income = ZERO
    total_expense = ZERO
    by_category: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    by_month: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])

    for transaction in transactions:
        income, expense = _split(transaction)
        total_income += income
        total_expense += expense

        for bucket in (by_category[transaction.category], by_month[transaction.month_key]):
            bucket[0] += income
            bucket[1] += expense

    category_data = [
        CategoryStat(
            category=category,
            income=income,
            expense=expense,
            total=income + expense,
        )
        for category, (income, expense) in sorted(by_category.items())
    ]

    monthly_data = [
        MonthlyStat(
            month=month,
            income=income,
            expense=expense,
            balance=income - expense,
        )
        for month, (income, expense) in sorted(by_month.items())
    ]

    top_categories = sorted(
        category_data,
        key=lambda stat: (-stat.total, stat.category),
    )[:TOP_CATEGORY_COUNT]

    monthly_trend = [
        MonthlyTrendPoint(month=stat.month, balance=stat.balance)
        for stat in monthly_data
    ]

    return TransactionStats(
        summary=Summary(
            total_income=total_income,
            total_expense=total_expense,
            net_balance=total_income - total_expense,
        ),
        category_data=category_data,
        monthly_data=monthly_data,
        top_categories=top_categories,
        monthly_trend=monthly_trend,
    )


class StatisticsService:
    """Fetches a user's transactions for a range and aggregates them."""

    def __init__(self, storage: TransactionStorageInterface):
        self._storage = storage

    async def get_stats(
        self,
        ctx: AuthContext,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> TransactionStats:
        """
        Statistics for the caller over an inclusive date range.

        Raises:
            ValidationError: If a bound is unparseable or start is after end
        """
        date_range = parse_date_range(start_date, end_date)
        transactions = await self._storage.list_transactions(
            ctx.user_id, date_range=date_range
        )
        return compute_statistics(transactions)
