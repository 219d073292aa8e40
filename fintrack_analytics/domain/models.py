"""Domain models - immutable value objects consumed and produced by the analysis engine"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from dateutil.relativedelta import relativedelta

from fintrack_analytics.domain.exceptions import InvalidArgumentError


class Category(str, Enum):
    """Transaction category"""

    HOUSING = "HOUSING"
    RECREATIONAL = "RECREATIONAL"
    ALIMENTATION = "ALIMENTATION"
    INVERSION = "INVERSION"
    TRANSPORTATION = "TRANSPORTATION"
    HEALTH = "HEALTH"
    EDUCATION = "EDUCATION"
    UTILITIES = "UTILITIES"
    SALARY = "SALARY"
    FREELANCE = "FREELANCE"
    GIFTS = "GIFTS"
    SALES = "SALES"
    OTHER = "OTHER"

    @property
    def description(self) -> str:
        return _CATEGORY_DESCRIPTIONS[self]

    @classmethod
    def from_string(cls, name: Optional[str]) -> "Category":
        if name is None or not name.strip():
            raise InvalidArgumentError("'category' must not be null or blank")
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise InvalidArgumentError(f"Invalid category: '{name}'") from None


_CATEGORY_DESCRIPTIONS = {
    Category.HOUSING: "Home-related expenses",
    Category.RECREATIONAL: "Money spent for entertainment purposes",
    Category.ALIMENTATION: "Food-related expenses",
    Category.INVERSION: "Expenses related to investments",
    Category.TRANSPORTATION: "Expenses related to transport and travel",
    Category.HEALTH: "Health and medical-related expenses",
    Category.EDUCATION: "Expenses related to learning and education",
    Category.UTILITIES: "Essential services like water, electricity, gas, internet",
    Category.SALARY: "Income from work or services rendered",
    Category.FREELANCE: "Income from freelance work or independent projects",
    Category.GIFTS: "Money received as gifts or donations",
    Category.SALES: "Income from selling goods or services",
    Category.OTHER: "Anything that does not fit another category",
}


@dataclass(frozen=True)
class Transaction:
    """
    Read-only view of a transaction as seen by the analysis engine.

    The sign of amount encodes the direction: income > 0, expense < 0.
    Zero amounts are rejected since they are neither.
    """

    amount: Decimal
    date: date
    category: Optional[Category] = None

    def __post_init__(self) -> None:
        amount = self.amount
        if isinstance(amount, bool) or not isinstance(amount, (Decimal, int)):
            raise InvalidArgumentError(
                f"amount must be a Decimal or int, got {type(amount).__name__}"
            )
        amount = Decimal(amount)
        if not amount.is_finite():
            raise InvalidArgumentError(f"Transaction amount must be finite. Provided: {amount}")
        if amount == 0:
            raise InvalidArgumentError("Transaction amount cannot be zero")
        if not isinstance(self.date, date):
            raise InvalidArgumentError("Transaction date must be a date")
        if self.category is not None and not isinstance(self.category, Category):
            raise InvalidArgumentError(f"Invalid category: {self.category!r}")
        object.__setattr__(self, "amount", amount)

    @classmethod
    def income(cls, amount: Decimal, on: date, category: Optional[Category] = None) -> "Transaction":
        """Build an income; amount is the positive magnitude"""
        txn = cls(amount=amount, date=on, category=category)
        if txn.is_expense:
            raise InvalidArgumentError("Income amount must be positive")
        return txn

    @classmethod
    def expense(cls, amount: Decimal, on: date, category: Optional[Category] = None) -> "Transaction":
        """Build an expense; stored negative whatever the sign of amount"""
        if isinstance(amount, (Decimal, int)) and not isinstance(amount, bool) and Decimal(amount).is_finite():
            amount = -abs(Decimal(amount))
        return cls(amount=amount, date=on, category=category)

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0


class Unit(str, Enum):
    """Unit a metric value is expressed in"""

    CURRENCY = "CURRENCY"
    PERCENT = "PERCENT"


class KpiType(str, Enum):
    """Supported KPI analyses, each bound to the unit of its result"""

    SAVINGS_RATE = "SAVINGS_RATE"
    MONTHLY_AVERAGE_EXPENSES = "MONTHLY_AVERAGE_EXPENSES"
    SPENDING_TREND = "SPENDING_TREND"

    @property
    def unit(self) -> Unit:
        return _KPI_UNITS[self]

    @classmethod
    def from_string(cls, value: Optional[str]) -> "KpiType":
        """Parse case-insensitively, ignoring surrounding whitespace"""
        if value is None or not value.strip():
            raise InvalidArgumentError("'type' must not be null or blank")
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise InvalidArgumentError(f"Invalid analysis type: '{value}'") from None


_KPI_UNITS = {
    KpiType.SAVINGS_RATE: Unit.PERCENT,
    KpiType.MONTHLY_AVERAGE_EXPENSES: Unit.CURRENCY,
    KpiType.SPENDING_TREND: Unit.PERCENT,
}


@dataclass(frozen=True)
class Metric:
    """Unit-tagged scalar KPI value"""

    value: Decimal
    unit: Unit

    def __post_init__(self) -> None:
        if self.value is None:
            raise InvalidArgumentError("value must not be null")
        if self.unit is None:
            raise InvalidArgumentError("unit must not be null")

    @classmethod
    def zero(cls, unit: Unit) -> "Metric":
        return cls(Decimal(0), unit)


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one KPI analysis"""

    type: KpiType
    value: Metric
    calculated_at: date = field(default_factory=date.today)
    breakdown: Optional[Mapping[str, Decimal]] = field(default=None, hash=False)
    reference_value: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.type is None:
            raise InvalidArgumentError("type cannot be null")
        if self.value is None:
            raise InvalidArgumentError("value cannot be null")
        if self.breakdown is not None:
            object.__setattr__(self, "breakdown", MappingProxyType(dict(self.breakdown)))

    @classmethod
    def of(cls, kpi_type: KpiType, value: Metric, calculated_at: Optional[date] = None) -> "AnalysisResult":
        """Plain result for scalar KPIs"""
        return cls(type=kpi_type, value=value, calculated_at=calculated_at or date.today())

    @classmethod
    def with_breakdown(
        cls,
        kpi_type: KpiType,
        value: Metric,
        breakdown: Mapping[str, Decimal],
    ) -> "AnalysisResult":
        if breakdown is None:
            raise InvalidArgumentError("breakdown cannot be null")
        return cls(type=kpi_type, value=value, breakdown=breakdown)

    @classmethod
    def with_reference(cls, kpi_type: KpiType, value: Metric, reference_value: Decimal) -> "AnalysisResult":
        if reference_value is None:
            raise InvalidArgumentError("referenceValue cannot be null")
        return cls(type=kpi_type, value=value, reference_value=reference_value)

    @property
    def has_breakdown(self) -> bool:
        return self.breakdown is not None and len(self.breakdown) > 0

    @property
    def has_reference_value(self) -> bool:
        return self.reference_value is not None


MAX_PERIOD_DAYS = 360
MAX_PERIOD_MONTHS = 120
MAX_PERIOD_YEARS = 10


@dataclass(frozen=True)
class AnalysisPeriod:
    """Inclusive date range an analysis covers"""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start is None:
            raise InvalidArgumentError("start date cannot be null")
        if self.end is None:
            raise InvalidArgumentError("end date cannot be null")
        if self.start > self.end:
            raise InvalidArgumentError(
                f"start date ({self.start}) must not be after end date ({self.end})"
            )

    @classmethod
    def last_days(cls, days: int, today: Optional[date] = None) -> "AnalysisPeriod":
        _check_span(days, "days", MAX_PERIOD_DAYS)
        end = today or date.today()
        return cls(end - timedelta(days=days), end)

    @classmethod
    def last_months(cls, months: int, today: Optional[date] = None) -> "AnalysisPeriod":
        _check_span(months, "months", MAX_PERIOD_MONTHS)
        end = today or date.today()
        return cls(end - relativedelta(months=months), end)

    @classmethod
    def last_years(cls, years: int, today: Optional[date] = None) -> "AnalysisPeriod":
        _check_span(years, "years", MAX_PERIOD_YEARS)
        end = today or date.today()
        return cls(end - relativedelta(years=years), end)

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


def _check_span(value: int, name: str, maximum: int) -> None:
    if value < 0:
        raise InvalidArgumentError(f"{name} must be non-negative. Provided: {value}")
    if value > maximum:
        raise InvalidArgumentError(f"{name} must not exceed {maximum}. Provided: {value}")


@dataclass(frozen=True)
class SpendingByCategory:
    """Expense distribution by category, for pie / bar charts"""

    amounts: Dict[Category, Decimal]
    total_expenses: Decimal


@dataclass(frozen=True)
class MonthlyCashflow:
    """Income and expense totals keyed by 'YYYY-MM'"""

    income: Dict[str, Decimal]
    expenses: Dict[str, Decimal]


@dataclass(frozen=True)
class SpendingSummary:
    """Aggregated spending for a period"""

    total_spending: Decimal
    period_start: date
    period_end: date
    breakdown_by_category: Dict[str, Decimal] = field(default_factory=dict, hash=False)
    count_transactions: int = 0

    def __post_init__(self) -> None:
        if self.total_spending is None:
            raise InvalidArgumentError("total_spending must not be null")
        if self.period_start is None or self.period_end is None:
            raise InvalidArgumentError("period start and end must not be null")
        if self.period_start > self.period_end:
            raise InvalidArgumentError("period_start must be on or before period_end")
        if self.count_transactions < 0:
            raise InvalidArgumentError("count_transactions must not be negative")
        breakdown = {
            key: (amount if amount is not None else Decimal(0))
            for key, amount in (self.breakdown_by_category or {}).items()
        }
        object.__setattr__(self, "breakdown_by_category", breakdown)

    @classmethod
    def empty(cls, start: date, end: date) -> "SpendingSummary":
        return cls(total_spending=Decimal(0), period_start=start, period_end=end)


@dataclass(frozen=True)
class DashboardOverview:
    """Everything the dashboard renders for one period"""

    spending_by_category: SpendingByCategory
    monthly_cashflow: MonthlyCashflow
    kpis: List[AnalysisResult]
