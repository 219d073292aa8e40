"""Dependency injection for FastAPI endpoints"""

from datetime import date
from functools import lru_cache
from typing import Callable

from fastapi import Depends, Request

from fintrack_analytics.application.kpi import KpiAnalysisService, TransactionSource
from fintrack_analytics.application.reports import ReportService
from fintrack_analytics.config import settings
from fintrack_analytics.domain.analysis import FinancialAnalysisService
from fintrack_analytics.infrastructure.clients.transactions import TransactionClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> Callable[[], date]:
    """Clock used to resolve default periods"""
    return date.today


def get_transaction_client() -> TransactionSource:
    """Provide transaction service client instance"""
    return TransactionClient()


@lru_cache
def get_analysis_service() -> FinancialAnalysisService:
    """Shared strategy registry, built once per process"""
    return FinancialAnalysisService.default(trend_window_days=settings.trend_window_days)


def get_kpi_service(
    source: TransactionSource = Depends(get_transaction_client),
    analysis_service: FinancialAnalysisService = Depends(get_analysis_service),
) -> KpiAnalysisService:
    return KpiAnalysisService(source, analysis_service)


def get_report_service(
    source: TransactionSource = Depends(get_transaction_client),
    analysis_service: FinancialAnalysisService = Depends(get_analysis_service),
) -> ReportService:
    return ReportService(source, analysis_service)
