"""Strategy registry - routes a KpiType to the strategy that computes it"""

import logging
from datetime import date
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Optional

from fintrack_analytics.domain.exceptions import (
    InvalidArgumentError,
    StrategyConfigurationError,
    StrategyNotFoundError,
)
from fintrack_analytics.domain.models import AnalysisResult, Category, KpiType, Transaction
from fintrack_analytics.domain.strategies import FinancialAnalysisStrategy, default_strategies

logger = logging.getLogger(__name__)


class FinancialAnalysisService:
    """
    Dispatches KPI requests to registered strategies.

    The registry is built once and never mutated, so one instance can be
    shared freely between threads and requests.
    """

    def __init__(
        self,
        strategies: Iterable[FinancialAnalysisStrategy],
        today: Callable[[], date] = date.today,
    ):
        if strategies is None:
            raise StrategyConfigurationError("Strategies must not be null")

        registry: Dict[KpiType, FinancialAnalysisStrategy] = {}
        for strategy in strategies:
            kpi_type = strategy.supports()
            if kpi_type in registry:
                raise StrategyConfigurationError(
                    f"Duplicate strategies for {kpi_type.value}: "
                    f"{type(registry[kpi_type]).__name__} and {type(strategy).__name__}"
                )
            registry[kpi_type] = strategy

        if not registry:
            raise StrategyConfigurationError("At least one strategy must be provided")

        self._strategies = MappingProxyType(registry)
        self._today = today

    @classmethod
    def default(
        cls,
        today: Callable[[], date] = date.today,
        trend_window_days: int = 30,
    ) -> "FinancialAnalysisService":
        """Service wired with every built-in strategy"""
        return cls(default_strategies(today, trend_window_days), today=today)

    def supported_types(self) -> List[KpiType]:
        return list(self._strategies)

    def strategy_for(self, kpi_type: KpiType) -> FinancialAnalysisStrategy:
        """
        Look up the strategy for a KPI type.

        Raises:
            StrategyNotFoundError: If no strategy declares support for kpi_type
        """
        if not isinstance(kpi_type, KpiType):
            raise StrategyNotFoundError(f"No strategy registered for analysis type {kpi_type!r}")
        strategy = self._strategies.get(kpi_type)
        if strategy is None:
            raise StrategyNotFoundError(f"No strategy registered for analysis type {kpi_type.value}")
        return strategy

    def analyze(
        self,
        kpi_type: Optional[KpiType],
        transactions: Optional[Iterable[Transaction]],
        category: Optional[Category] = None,
    ) -> AnalysisResult:
        """
        Run the strategy registered for kpi_type and wrap its metric.

        Args:
            kpi_type: KPI to compute
            transactions: Signed transactions to analyze (expense < 0)
            category: Optional filter applied before the computation

        Raises:
            InvalidArgumentError: On a missing type or transaction list
            StrategyNotFoundError: If kpi_type has no registered strategy
        """
        if kpi_type is None:
            raise InvalidArgumentError("AnalysisType must not be null")
        if transactions is None:
            raise InvalidArgumentError("Transactions must not be null")

        strategy = self.strategy_for(kpi_type)

        if category is None:
            metric = strategy.analyze(transactions)
        else:
            metric = strategy.analyze_category(transactions, category)

        logger.debug("Computed %s = %s %s", kpi_type.value, metric.value, metric.unit.value)
        return AnalysisResult.of(kpi_type, metric, calculated_at=self._today())
