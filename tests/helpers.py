"""Shared test builders"""

from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from fintrack_analytics.domain.models import AnalysisPeriod, Category, Transaction

# Every date-sensitive test runs against this "today"
TODAY = date(2026, 6, 15)


def expense(amount: str, days_ago: int = 0, category: Optional[Category] = None) -> Transaction:
    """Expense of the given magnitude, dated relative to TODAY"""
    return Transaction.expense(Decimal(amount), TODAY - timedelta(days=days_ago), category)


def income(amount: str, days_ago: int = 0, category: Optional[Category] = None) -> Transaction:
    """Income of the given magnitude, dated relative to TODAY"""
    return Transaction.income(Decimal(amount), TODAY - timedelta(days=days_ago), category)


class FakeTransactionSource:
    """In-memory stand-in for the transaction service"""

    def __init__(self, transactions: List[Transaction] | None = None, error: Exception | None = None):
        self.transactions = transactions or []
        self.error = error
        self.calls: list[tuple[str, AnalysisPeriod]] = []

    async def fetch_transactions(self, user_id: str, period: AnalysisPeriod) -> List[Transaction]:
        self.calls.append((user_id, period))
        if self.error is not None:
            raise self.error
        return [t for t in self.transactions if period.contains(t.date)]
