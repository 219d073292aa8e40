"""GET /v1/analysis/* - KPI and dashboard read-model endpoints"""

import logging
import time
from contextlib import contextmanager
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Dict, Iterator, Mapping, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from fintrack_analytics.api.dependencies import get_kpi_service, get_report_service, get_request_id, get_today
from fintrack_analytics.api.v1.schemas import (
    AnalysisResultResponse,
    CashflowResponse,
    OverviewResponse,
    SpendingByCategoryResponse,
    SpendingSummaryResponse,
)
from fintrack_analytics.application.kpi import KpiAnalysisService
from fintrack_analytics.application.reports import ReportService
from fintrack_analytics.config import settings
from fintrack_analytics.domain.exceptions import (
    InvalidArgumentError,
    StrategyNotFoundError,
    TransactionSourceError,
)
from fintrack_analytics.domain.models import (
    AnalysisPeriod,
    AnalysisResult,
    Category,
    KpiType,
    MonthlyCashflow,
    SpendingByCategory,
)
from fintrack_analytics.infrastructure.observability.logging import log_analysis
from fintrack_analytics.infrastructure.observability.metrics import (
    record_analysis,
    transaction_fetch_failures_counter,
)

router = APIRouter()


def resolve_period(
    start: Optional[date],
    end: Optional[date],
    today: Callable[[], date] = date.today,
    span_days: Optional[int] = None,
) -> AnalysisPeriod:
    """Fill missing bounds: end defaults to today, start to end minus span_days"""
    end = end or today()
    start = start or end - timedelta(days=span_days or settings.default_period_days)
    return AnalysisPeriod(start, end)


def trend_span_days() -> int:
    """Default span wide enough to hold both spending trend windows"""
    return max(settings.default_period_days, 2 * settings.trend_window_days)


def _amounts(values: Mapping[str, Decimal]) -> Dict[str, str]:
    return {key: str(amount) for key, amount in values.items()}


def to_result_response(result: AnalysisResult) -> AnalysisResultResponse:
    return AnalysisResultResponse(
        type=result.type.value,
        value=str(result.value.value),
        unit=result.value.unit.value,
        calculated_at=result.calculated_at,
        breakdown=_amounts(result.breakdown) if result.has_breakdown else None,
        reference_value=str(result.reference_value) if result.has_reference_value else None,
    )


def to_spending_response(spending: SpendingByCategory) -> SpendingByCategoryResponse:
    return SpendingByCategoryResponse(
        amounts={category.value: str(amount) for category, amount in spending.amounts.items()},
        total_expenses=str(spending.total_expenses),
    )


def to_cashflow_response(cashflow: MonthlyCashflow) -> CashflowResponse:
    return CashflowResponse(income=_amounts(cashflow.income), expenses=_amounts(cashflow.expenses))


@contextmanager
def translate_errors(request_id: str) -> Iterator[None]:
    """Map domain failures onto HTTP status codes"""
    try:
        yield
    except TransactionSourceError as e:
        transaction_fetch_failures_counter.inc()
        logging.error(f"Transaction service error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Transaction service unavailable")
    except InvalidArgumentError as e:
        logging.warning(f"Invalid request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except StrategyNotFoundError as e:
        logging.error(f"Unsupported analysis: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/analysis/kpi", response_model=AnalysisResultResponse)
async def get_kpi(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    kpi_type: str = Query(..., alias="type", description="SAVINGS_RATE, MONTHLY_AVERAGE_EXPENSES or SPENDING_TREND"),
    start: Optional[date] = Query(None, description="Period start (inclusive)"),
    end: Optional[date] = Query(None, description="Period end (inclusive)"),
    category: Optional[str] = Query(None, description="Restrict the KPI to one category"),
    kpi_service: KpiAnalysisService = Depends(get_kpi_service),
    today: Callable[[], date] = Depends(get_today),
):
    """
    Compute one KPI over the user's transactions.

    Flow:
    1. Parse KPI type, period and optional category
    2. Fetch transactions for the period
    3. Dispatch to the strategy for the KPI type
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        parsed_type = KpiType.from_string(kpi_type)
    except InvalidArgumentError as e:
        record_analysis("unknown", "invalid")
        raise HTTPException(status_code=400, detail=str(e))

    try:
        with translate_errors(request_id):
            span = trend_span_days() if parsed_type == KpiType.SPENDING_TREND else None
            period = resolve_period(start, end, today, span)
            parsed_category = Category.from_string(category) if category is not None else None
            result = await kpi_service.generate_kpi(parsed_type, user_id, period, parsed_category)

    except HTTPException as e:
        outcome = {404: "unsupported", 422: "invalid"}.get(e.status_code, "error")
        record_analysis(parsed_type.value, outcome)
        raise

    except Exception as e:
        record_analysis(parsed_type.value, "error")
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_analysis(parsed_type.value, "success")
    log_analysis(request_id, user_id, parsed_type.value, str(result.value.value), duration_ms)

    return to_result_response(result)


@router.get("/analysis/spending-by-category", response_model=SpendingByCategoryResponse)
async def get_spending_by_category(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    report_service: ReportService = Depends(get_report_service),
    today: Callable[[], date] = Depends(get_today),
):
    """Expense totals per category, for pie / bar charts"""
    with translate_errors(get_request_id(request)):
        spending = await report_service.spending_by_category(user_id, resolve_period(start, end, today))
    return to_spending_response(spending)


@router.get("/analysis/cashflow", response_model=CashflowResponse)
async def get_cashflow(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    report_service: ReportService = Depends(get_report_service),
    today: Callable[[], date] = Depends(get_today),
):
    """Monthly income and expense series"""
    with translate_errors(get_request_id(request)):
        cashflow = await report_service.monthly_cashflow(user_id, resolve_period(start, end, today))
    return to_cashflow_response(cashflow)


@router.get("/analysis/summary", response_model=SpendingSummaryResponse)
async def get_spending_summary(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    report_service: ReportService = Depends(get_report_service),
    today: Callable[[], date] = Depends(get_today),
):
    """Total spend for the period with its category breakdown"""
    with translate_errors(get_request_id(request)):
        summary = await report_service.spending_summary(user_id, resolve_period(start, end, today))
    return SpendingSummaryResponse(
        total_spending=str(summary.total_spending),
        period_start=summary.period_start,
        period_end=summary.period_end,
        breakdown_by_category=_amounts(summary.breakdown_by_category),
        count_transactions=summary.count_transactions,
    )


@router.get("/analysis/overview", response_model=OverviewResponse)
async def get_overview(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    report_service: ReportService = Depends(get_report_service),
    today: Callable[[], date] = Depends(get_today),
):
    """Dashboard payload: category split, cashflow and all KPIs"""
    with translate_errors(get_request_id(request)):
        overview = await report_service.overview(user_id, resolve_period(start, end, today, trend_span_days()))
    return OverviewResponse(
        user_id=user_id,
        spending_by_category=to_spending_response(overview.spending_by_category),
        monthly_cashflow=to_cashflow_response(overview.monthly_cashflow),
        kpis=[to_result_response(result) for result in overview.kpis],
    )
