"""Unit tests for strategy registration and dispatch"""

import pytest
from decimal import Decimal
from fintrack_analytics.domain.analysis import FinancialAnalysisService
from fintrack_analytics.domain.exceptions import (
    InvalidArgumentError,
    StrategyConfigurationError,
    StrategyNotFoundError,
)
from fintrack_analytics.domain.models import AnalysisResult, Category, KpiType, Unit
from fintrack_analytics.domain.strategies import (
    MonthlyAverageStrategy,
    SavingsRateStrategy,
    SpendingTrendStrategy,
)
from helpers import TODAY, expense, income


def test_default_registers_every_kpi(analysis_service: FinancialAnalysisService):
    assert set(analysis_service.supported_types()) == set(KpiType)


def test_analyze_wraps_metric_in_result(analysis_service: FinancialAnalysisService):
    result = analysis_service.analyze(KpiType.SAVINGS_RATE, [income("1000"), expense("400")])

    assert isinstance(result, AnalysisResult)
    assert result.type == KpiType.SAVINGS_RATE
    assert str(result.value.value) == "60.0000"
    assert result.value.unit == Unit.PERCENT
    assert result.calculated_at == TODAY
    assert result.has_breakdown is False
    assert result.has_reference_value is False


@pytest.mark.parametrize("kpi_type", list(KpiType))
def test_empty_transactions_give_zero_in_declared_unit(analysis_service: FinancialAnalysisService, kpi_type: KpiType):
    result = analysis_service.analyze(kpi_type, [])

    assert result.value.value == Decimal("0")
    assert result.value.unit == kpi_type.unit


@pytest.mark.parametrize("kpi_type", list(KpiType))
def test_null_element_rejected_for_every_kpi(analysis_service: FinancialAnalysisService, kpi_type: KpiType):
    with pytest.raises(InvalidArgumentError):
        analysis_service.analyze(kpi_type, [expense("10.00", days_ago=3), None])


def test_none_type_rejected(analysis_service: FinancialAnalysisService):
    with pytest.raises(InvalidArgumentError):
        analysis_service.analyze(None, [])


def test_none_transactions_rejected(analysis_service: FinancialAnalysisService):
    with pytest.raises(InvalidArgumentError):
        analysis_service.analyze(KpiType.SPENDING_TREND, None)


def test_category_routed_to_filtered_analysis(analysis_service: FinancialAnalysisService):
    transactions = [
        expense("100.00", days_ago=45, category=Category.HOUSING),
        expense("150.00", days_ago=15, category=Category.HOUSING),
        expense("999.00", days_ago=15, category=Category.HEALTH),
    ]

    result = analysis_service.analyze(KpiType.SPENDING_TREND, transactions, Category.HOUSING)

    assert str(result.value.value) == "50.0000"


def test_missing_strategy_fails_every_time(today):
    """Lookup failure is deterministic, not dependent on map ordering"""
    service = FinancialAnalysisService([SavingsRateStrategy(today)], today=today)

    for _ in range(3):
        with pytest.raises(StrategyNotFoundError, match="SPENDING_TREND"):
            service.analyze(KpiType.SPENDING_TREND, [])


@pytest.mark.parametrize("kpi_type", ["SAVINGS_RATE", "NET_WORTH", 42])
def test_lookup_by_non_kpi_type_not_found(analysis_service: FinancialAnalysisService, kpi_type):
    with pytest.raises(StrategyNotFoundError, match=str(kpi_type)):
        analysis_service.strategy_for(kpi_type)
    with pytest.raises(StrategyNotFoundError):
        analysis_service.analyze(kpi_type, [])


def test_duplicate_registration_rejected(today):
    with pytest.raises(StrategyConfigurationError, match="Duplicate"):
        FinancialAnalysisService([SavingsRateStrategy(today), SavingsRateStrategy(today)])


def test_empty_registration_rejected():
    with pytest.raises(StrategyConfigurationError):
        FinancialAnalysisService([])


def test_none_registration_rejected():
    with pytest.raises(StrategyConfigurationError):
        FinancialAnalysisService(None)


def test_strategy_for_returns_registered_instance(today):
    trend = SpendingTrendStrategy(today)
    service = FinancialAnalysisService([MonthlyAverageStrategy(today), trend])

    assert service.strategy_for(KpiType.SPENDING_TREND) is trend
    assert service.supported_types() == [KpiType.MONTHLY_AVERAGE_EXPENSES, KpiType.SPENDING_TREND]


def test_same_input_same_result(analysis_service: FinancialAnalysisService, sample_transactions):
    for kpi_type in KpiType:
        first = analysis_service.analyze(kpi_type, sample_transactions)
        second = analysis_service.analyze(kpi_type, sample_transactions)
        assert first == second
