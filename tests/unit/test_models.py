"""Unit tests for domain value objects"""

import pytest
from datetime import date
from decimal import Decimal
from fintrack_analytics.domain.exceptions import InvalidArgumentError
from fintrack_analytics.domain.models import (
    AnalysisPeriod,
    AnalysisResult,
    Category,
    KpiType,
    Metric,
    SpendingSummary,
    Transaction,
    Unit,
)


@pytest.mark.parametrize("raw", ["SAVINGS_RATE", "savings_rate", "  Savings_Rate \t"])
def test_kpi_type_parsing_is_lenient(raw: str):
    assert KpiType.from_string(raw) == KpiType.SAVINGS_RATE


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_kpi_type_blank_rejected(raw):
    with pytest.raises(InvalidArgumentError, match="null or blank"):
        KpiType.from_string(raw)


def test_kpi_type_unknown_echoes_input():
    with pytest.raises(InvalidArgumentError, match="'net_worth'"):
        KpiType.from_string("net_worth")


def test_kpi_units():
    assert KpiType.SAVINGS_RATE.unit == Unit.PERCENT
    assert KpiType.MONTHLY_AVERAGE_EXPENSES.unit == Unit.CURRENCY
    assert KpiType.SPENDING_TREND.unit == Unit.PERCENT


def test_category_parsing():
    assert Category.from_string(" housing ") == Category.HOUSING
    assert Category.HOUSING.description == "Home-related expenses"
    with pytest.raises(InvalidArgumentError, match="'groceries'"):
        Category.from_string("groceries")


def test_expense_stored_negative():
    """Sign convention: expense magnitude is negated whatever was passed in"""
    assert Transaction.expense(Decimal("12.50"), date(2026, 1, 1)).amount == Decimal("-12.50")
    assert Transaction.expense(Decimal("-12.50"), date(2026, 1, 1)).amount == Decimal("-12.50")


def test_income_and_expense_flags():
    txn_in = Transaction.income(Decimal("10"), date(2026, 1, 1))
    txn_out = Transaction.expense(Decimal("10"), date(2026, 1, 1))

    assert txn_in.is_income and not txn_in.is_expense
    assert txn_out.is_expense and not txn_out.is_income


def test_negative_income_rejected():
    with pytest.raises(InvalidArgumentError):
        Transaction.income(Decimal("-5"), date(2026, 1, 1))


def test_zero_amount_rejected():
    with pytest.raises(InvalidArgumentError, match="zero"):
        Transaction(Decimal("0.00"), date(2026, 1, 1))


def test_float_amount_rejected():
    with pytest.raises(InvalidArgumentError):
        Transaction(12.5, date(2026, 1, 1))


@pytest.mark.parametrize("raw", ["NaN", "-Infinity", "Infinity", "sNaN"])
def test_non_finite_amount_rejected(raw: str):
    with pytest.raises(InvalidArgumentError, match="finite"):
        Transaction(Decimal(raw), date(2026, 1, 1))


@pytest.mark.parametrize("raw", ["NaN", "Infinity", "sNaN"])
def test_non_finite_builders_rejected(raw: str):
    with pytest.raises(InvalidArgumentError, match="finite"):
        Transaction.income(Decimal(raw), date(2026, 1, 1))
    with pytest.raises(InvalidArgumentError, match="finite"):
        Transaction.expense(Decimal(raw), date(2026, 1, 1))


def test_int_amount_converted_to_decimal():
    txn = Transaction(-7, date(2026, 1, 1), Category.OTHER)
    assert isinstance(txn.amount, Decimal)
    assert txn.amount == Decimal("-7")


def test_transaction_is_immutable():
    txn = Transaction(Decimal("-1"), date(2026, 1, 1))
    with pytest.raises(AttributeError):
        txn.amount = Decimal("-2")


def test_metric_requires_value_and_unit():
    with pytest.raises(InvalidArgumentError):
        Metric(None, Unit.PERCENT)
    with pytest.raises(InvalidArgumentError):
        Metric(Decimal("1"), None)


def test_result_empty_breakdown_counts_as_absent():
    result = AnalysisResult.with_breakdown(KpiType.SAVINGS_RATE, Metric.zero(Unit.PERCENT), {})
    assert result.has_breakdown is False


def test_result_breakdown_is_read_only_copy():
    source = {"HOUSING": Decimal("-10")}
    result = AnalysisResult.with_breakdown(KpiType.SAVINGS_RATE, Metric.zero(Unit.PERCENT), source)
    source["HEALTH"] = Decimal("-1")

    assert result.has_breakdown is True
    assert dict(result.breakdown) == {"HOUSING": Decimal("-10")}
    with pytest.raises(TypeError):
        result.breakdown["OTHER"] = Decimal("0")


def test_result_reference_value():
    result = AnalysisResult.with_reference(KpiType.SAVINGS_RATE, Metric.zero(Unit.PERCENT), Decimal("20"))
    assert result.has_reference_value is True
    assert result.reference_value == Decimal("20")


def test_result_optional_helpers_reject_none():
    metric = Metric.zero(Unit.PERCENT)
    with pytest.raises(InvalidArgumentError):
        AnalysisResult.with_breakdown(KpiType.SAVINGS_RATE, metric, None)
    with pytest.raises(InvalidArgumentError):
        AnalysisResult.with_reference(KpiType.SAVINGS_RATE, metric, None)


def test_result_requires_type_and_value():
    with pytest.raises(InvalidArgumentError):
        AnalysisResult.of(None, Metric.zero(Unit.PERCENT))
    with pytest.raises(InvalidArgumentError):
        AnalysisResult.of(KpiType.SAVINGS_RATE, None)


def test_result_defaults_to_today():
    result = AnalysisResult.of(KpiType.SAVINGS_RATE, Metric.zero(Unit.PERCENT))
    assert result.calculated_at == date.today()


def test_period_start_after_end_rejected():
    with pytest.raises(InvalidArgumentError, match="2026-02-01"):
        AnalysisPeriod(date(2026, 2, 1), date(2026, 1, 1))


def test_period_single_day_allowed_and_inclusive():
    period = AnalysisPeriod(date(2026, 1, 1), date(2026, 1, 1))
    assert period.contains(date(2026, 1, 1))
    assert not period.contains(date(2026, 1, 2))


def test_period_last_days():
    period = AnalysisPeriod.last_days(30, today=date(2026, 6, 15))
    assert period == AnalysisPeriod(date(2026, 5, 16), date(2026, 6, 15))


def test_period_last_months_clamps_month_end():
    period = AnalysisPeriod.last_months(1, today=date(2026, 3, 31))
    assert period.start == date(2026, 2, 28)


def test_period_last_years_from_leap_day():
    period = AnalysisPeriod.last_years(1, today=date(2028, 2, 29))
    assert period.start == date(2027, 2, 28)


@pytest.mark.parametrize(
    "factory, value",
    [
        (AnalysisPeriod.last_days, 361),
        (AnalysisPeriod.last_days, -1),
        (AnalysisPeriod.last_months, 121),
        (AnalysisPeriod.last_years, 11),
    ],
)
def test_period_span_limits(factory, value):
    with pytest.raises(InvalidArgumentError):
        factory(value)


def test_spending_summary_invariants():
    with pytest.raises(InvalidArgumentError):
        SpendingSummary(Decimal("0"), date(2026, 2, 1), date(2026, 1, 1))
    with pytest.raises(InvalidArgumentError):
        SpendingSummary(Decimal("0"), date(2026, 1, 1), date(2026, 2, 1), count_transactions=-1)


def test_spending_summary_fills_missing_amounts():
    summary = SpendingSummary(Decimal("-5"), date(2026, 1, 1), date(2026, 1, 31), {"HOUSING": None}, 1)
    assert summary.breakdown_by_category == {"HOUSING": Decimal("0")}


def test_empty_spending_summary():
    summary = SpendingSummary.empty(date(2026, 1, 1), date(2026, 1, 31))
    assert summary.total_spending == Decimal("0")
    assert summary.breakdown_by_category == {}
    assert summary.count_transactions == 0
