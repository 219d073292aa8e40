"""Pydantic schemas for API responses

Decimal values are serialized as strings so their scale survives
(a savings rate of 60.0000 stays "60.0000").
"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel


class AnalysisResultResponse(BaseModel):
    """Response for GET /v1/analysis/kpi"""

    type: str
    value: str
    unit: str
    calculated_at: date
    breakdown: Optional[Dict[str, str]] = None
    reference_value: Optional[str] = None


class SpendingByCategoryResponse(BaseModel):
    """Response for GET /v1/analysis/spending-by-category"""

    amounts: Dict[str, str]
    total_expenses: str


class CashflowResponse(BaseModel):
    """Response for GET /v1/analysis/cashflow, keyed by YYYY-MM"""

    income: Dict[str, str]
    expenses: Dict[str, str]


class SpendingSummaryResponse(BaseModel):
    """Response for GET /v1/analysis/summary"""

    total_spending: str
    period_start: date
    period_end: date
    breakdown_by_category: Dict[str, str]
    count_transactions: int


class OverviewResponse(BaseModel):
    """Response for GET /v1/analysis/overview"""

    user_id: str
    spending_by_category: SpendingByCategoryResponse
    monthly_cashflow: CashflowResponse
    kpis: List[AnalysisResultResponse]
