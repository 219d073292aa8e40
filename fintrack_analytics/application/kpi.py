"""KPI generation for a user and period - fetches transactions, then runs the engine"""

import logging
from typing import List, Optional, Protocol

from fintrack_analytics.domain.analysis import FinancialAnalysisService
from fintrack_analytics.domain.exceptions import InvalidArgumentError
from fintrack_analytics.domain.models import AnalysisPeriod, AnalysisResult, Category, KpiType, Transaction
from fintrack_analytics.infrastructure.observability.metrics import transactions_analyzed_histogram

logger = logging.getLogger(__name__)


class TransactionSource(Protocol):
    """Anything able to list a user's transactions for a period"""

    async def fetch_transactions(self, user_id: str, period: AnalysisPeriod) -> List[Transaction]:
        ...


def validate_request(user_id: Optional[str], period: Optional[AnalysisPeriod]) -> None:
    if user_id is None or not str(user_id).strip():
        raise InvalidArgumentError("user_id must not be null or blank")
    if period is None:
        raise InvalidArgumentError("Analysis period must not be null")


class KpiAnalysisService:
    """Orchestrates transaction retrieval and KPI computation"""

    def __init__(self, source: TransactionSource, analysis_service: FinancialAnalysisService):
        if source is None:
            raise InvalidArgumentError("source must not be null")
        if analysis_service is None:
            raise InvalidArgumentError("analysis_service must not be null")
        self.source = source
        self.analysis_service = analysis_service

    async def generate_kpi(
        self,
        kpi_type: Optional[KpiType],
        user_id: Optional[str],
        period: Optional[AnalysisPeriod],
        category: Optional[Category] = None,
    ) -> AnalysisResult:
        """
        Compute one KPI over the user's transactions in period.

        Inputs are checked before the transaction service is called.

        Raises:
            InvalidArgumentError: On a missing type, user or period
            StrategyNotFoundError: If the type has no registered strategy
            TransactionSourceError: If transactions cannot be fetched
        """
        if kpi_type is None:
            raise InvalidArgumentError("Analysis type must not be null")
        validate_request(user_id, period)

        transactions = await self.source.fetch_transactions(user_id, period)
        logger.debug(
            "Fetched %d transactions for %s between %s and %s",
            len(transactions), user_id, period.start, period.end,
        )
        transactions_analyzed_histogram.observe(len(transactions))
        return self.analysis_service.analyze(kpi_type, transactions, category)
