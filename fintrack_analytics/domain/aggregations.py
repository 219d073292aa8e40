"""Read-model aggregations - category and monthly rollups used by dashboards"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, List

from fintrack_analytics.domain.models import (
    AnalysisPeriod,
    Category,
    MonthlyCashflow,
    SpendingByCategory,
    SpendingSummary,
    Transaction,
)
from fintrack_analytics.domain.strategies import validate_transactions
from fintrack_analytics.utils.date_utils import month_key


def expenses_by_category(transactions: List[Transaction]) -> Dict[Category, Decimal]:
    """
    Sum expenses per category (signed, so every value is negative).

    Uncategorised expenses are reported under OTHER. Categories with no
    expenses are left out.
    """
    totals: Dict[Category, Decimal] = defaultdict(Decimal)
    for txn in validate_transactions(transactions):
        if txn.is_expense:
            totals[txn.category or Category.OTHER] += txn.amount
    return dict(totals)


def monthly_totals(transactions: List[Transaction], income: bool) -> Dict[str, Decimal]:
    """Sum income (income=True) or expenses per 'YYYY-MM', in month order"""
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for txn in validate_transactions(transactions):
        if txn.is_income if income else txn.is_expense:
            totals[month_key(txn.date)] += txn.amount
    return dict(sorted(totals.items()))


def spending_by_category(transactions: List[Transaction]) -> SpendingByCategory:
    amounts = expenses_by_category(transactions)
    return SpendingByCategory(amounts=amounts, total_expenses=sum(amounts.values(), Decimal(0)))


def monthly_cashflow(transactions: List[Transaction]) -> MonthlyCashflow:
    return MonthlyCashflow(
        income=monthly_totals(transactions, income=True),
        expenses=monthly_totals(transactions, income=False),
    )


def spending_summary(transactions: List[Transaction], period: AnalysisPeriod) -> SpendingSummary:
    """
    Total spend inside the period, broken down by category name.

    Only expenses dated within the period count, both for the total and
    for count_transactions.
    """
    in_period = [
        t for t in validate_transactions(transactions)
        if t.is_expense and period.contains(t.date)
    ]
    if not in_period:
        return SpendingSummary.empty(period.start, period.end)

    by_category = expenses_by_category(in_period)
    return SpendingSummary(
        total_spending=sum(by_category.values(), Decimal(0)),
        period_start=period.start,
        period_end=period.end,
        breakdown_by_category={category.value: amount for category, amount in by_category.items()},
        count_transactions=len(in_period),
    )
