"""Dashboard read models assembled from one fetch of the user's transactions"""

from fintrack_analytics.application.kpi import TransactionSource, validate_request
from fintrack_analytics.domain import aggregations
from fintrack_analytics.domain.analysis import FinancialAnalysisService
from fintrack_analytics.domain.models import (
    AnalysisPeriod,
    DashboardOverview,
    MonthlyCashflow,
    SpendingByCategory,
    SpendingSummary,
)


class ReportService:
    """Builds spending and cashflow read models for a user and period"""

    def __init__(self, source: TransactionSource, analysis_service: FinancialAnalysisService):
        self.source = source
        self.analysis_service = analysis_service

    async def spending_by_category(self, user_id: str, period: AnalysisPeriod) -> SpendingByCategory:
        validate_request(user_id, period)
        transactions = await self.source.fetch_transactions(user_id, period)
        return aggregations.spending_by_category(transactions)

    async def monthly_cashflow(self, user_id: str, period: AnalysisPeriod) -> MonthlyCashflow:
        validate_request(user_id, period)
        transactions = await self.source.fetch_transactions(user_id, period)
        return aggregations.monthly_cashflow(transactions)

    async def spending_summary(self, user_id: str, period: AnalysisPeriod) -> SpendingSummary:
        validate_request(user_id, period)
        transactions = await self.source.fetch_transactions(user_id, period)
        return aggregations.spending_summary(transactions, period)

    async def overview(self, user_id: str, period: AnalysisPeriod) -> DashboardOverview:
        """Category split, cashflow and every supported KPI from a single fetch"""
        validate_request(user_id, period)
        transactions = await self.source.fetch_transactions(user_id, period)
        return DashboardOverview(
            spending_by_category=aggregations.spending_by_category(transactions),
            monthly_cashflow=aggregations.monthly_cashflow(transactions),
            kpis=[
                self.analysis_service.analyze(kpi_type, transactions)
                for kpi_type in self.analysis_service.supported_types()
            ],
        )
