"""KPI strategies - one self-contained algorithm per KpiType"""

import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Callable, Iterable, List, Optional

from fintrack_analytics.domain.exceptions import InvalidArgumentError
from fintrack_analytics.domain.models import Category, KpiType, Metric, Transaction, Unit
from fintrack_analytics.utils.date_utils import months_between

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
RATE_PRECISION = Decimal("0.0001")
HUNDRED = Decimal(100)


class FinancialAnalysisStrategy(ABC):
    """
    Base class for KPI strategies.

    Strategies are pure functions over an in-memory list of transactions.
    The only state they hold is the clock used to resolve "today".
    """

    def __init__(self, today: Callable[[], date] = date.today):
        self._today = today

    @abstractmethod
    def supports(self) -> KpiType:
        """KPI type this strategy computes"""

    @abstractmethod
    def analyze(self, transactions: Optional[Iterable[Transaction]]) -> Metric:
        """Compute the KPI over all given transactions"""

    def analyze_category(
        self,
        transactions: Optional[Iterable[Transaction]],
        category: Optional[Category],
    ) -> Metric:
        """Restrict to one category, then compute the KPI"""
        checked = validate_transactions(transactions)
        if category is None:
            raise InvalidArgumentError("category must not be null")
        return self.analyze([t for t in checked if t.category == category])


def validate_transactions(transactions: Optional[Iterable[Transaction]]) -> List[Transaction]:
    """
    Materialize and check the input before any computation.

    Raises:
        InvalidArgumentError: If the collection is None or holds a None element
    """
    if transactions is None:
        raise InvalidArgumentError("transactions must not be null")
    checked = list(transactions)
    if any(t is None for t in checked):
        raise InvalidArgumentError("transactions must not contain null elements")
    return checked


def percentage(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    Ratio as a percentage: divide to 4 decimals (half-even), then scale by 100.

    The result keeps the 4-decimal scale (0.6667 -> 66.6700), it is not re-rounded.
    """
    return (numerator / denominator).quantize(RATE_PRECISION, rounding=ROUND_HALF_EVEN) * HUNDRED


class MonthlyAverageStrategy(FinancialAnalysisStrategy):
    """Average monthly spend since the oldest expense, as a negative currency amount"""

    def supports(self) -> KpiType:
        return KpiType.MONTHLY_AVERAGE_EXPENSES

    def analyze(self, transactions: Optional[Iterable[Transaction]]) -> Metric:
        expenses = [t for t in validate_transactions(transactions) if t.is_expense]
        if not expenses:
            return Metric.zero(Unit.CURRENCY)

        today = self._today()
        total = sum((t.amount for t in expenses), Decimal(0))
        oldest = min(min(t.date for t in expenses), today)

        # Whole months elapsed; expenses all in the current month count as one
        months = months_between(oldest, today) or 1

        average = (total / months).quantize(CENTS, rounding=ROUND_HALF_EVEN)
        logger.debug("Monthly average %s over %d month(s) since %s", average, months, oldest)
        return Metric(average, Unit.CURRENCY)


class SavingsRateStrategy(FinancialAnalysisStrategy):
    """Share of income left after expenses, in percent"""

    def supports(self) -> KpiType:
        return KpiType.SAVINGS_RATE

    def analyze(self, transactions: Optional[Iterable[Transaction]]) -> Metric:
        checked = validate_transactions(transactions)

        total_income = sum((t.amount for t in checked if t.is_income), Decimal(0))
        total_expenses = sum((t.amount for t in checked if t.is_expense), Decimal(0))

        if total_income == 0:
            return Metric.zero(Unit.PERCENT)

        # Expenses are negative, so this is income minus what was spent
        savings = total_income + total_expenses
        return Metric(percentage(savings, total_income), Unit.PERCENT)


class SpendingTrendStrategy(FinancialAnalysisStrategy):
    """
    Change in spend between the last 30 days and the 30 days before.

    Windows relative to today (T), both inclusive:
    - recent:   [T-30, T]
    - previous: [T-60, T-31]

    Anything older than the previous window, or dated after today, is ignored.
    A positive trend means spending went up.
    """

    def __init__(self, today: Callable[[], date] = date.today, window_days: int = 30):
        super().__init__(today)
        if window_days <= 0:
            raise InvalidArgumentError(f"window_days must be positive. Provided: {window_days}")
        self.window_days = window_days

    def supports(self) -> KpiType:
        return KpiType.SPENDING_TREND

    def analyze(self, transactions: Optional[Iterable[Transaction]]) -> Metric:
        expenses = [t for t in validate_transactions(transactions) if t.is_expense]

        today = self._today()
        recent_start = today - timedelta(days=self.window_days)
        previous_start = today - timedelta(days=2 * self.window_days)
        previous_end = today - timedelta(days=self.window_days + 1)

        recent = _sum_between(expenses, recent_start, today)
        previous = _sum_between(expenses, previous_start, previous_end)

        if previous == 0:
            return Metric.zero(Unit.PERCENT)

        # Same ratio as (recent - previous) / previous, with a positive denominator
        change = abs(recent) - abs(previous)
        return Metric(percentage(change, abs(previous)), Unit.PERCENT)


def _sum_between(transactions: List[Transaction], start: date, end: date) -> Decimal:
    return sum((t.amount for t in transactions if start <= t.date <= end), Decimal(0))


def default_strategies(
    today: Callable[[], date] = date.today,
    trend_window_days: int = 30,
) -> List[FinancialAnalysisStrategy]:
    """Built-in strategies, one per KpiType"""
    return [
        SavingsRateStrategy(today),
        MonthlyAverageStrategy(today),
        SpendingTrendStrategy(today, window_days=trend_window_days),
    ]
