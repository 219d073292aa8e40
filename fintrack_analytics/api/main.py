"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fintrack_analytics.api.dependencies import get_analysis_service
from fintrack_analytics.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fintrack_analytics.api.v1 import analysis
from fintrack_analytics.config import settings
from fintrack_analytics.domain.analysis import FinancialAnalysisService
from fintrack_analytics.infrastructure.observability.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting %s",
        settings.service_name,
        extra={
            "transactions_api_base": settings.transactions_api_base,
            "trend_window_days": settings.trend_window_days,
        },
    )
    yield


def create_app() -> FastAPI:
    """Build the KPI service: analysis routes, health with registered KPIs, Prometheus scrape"""
    setup_logging(settings.log_level)

    app = FastAPI(
        title="FinTrack Analytics",
        description="Financial KPIs (savings rate, monthly average expense, spending trend) and dashboard read models",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Request id must be set before metrics and routes see the request
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check(analysis_service: FinancialAnalysisService = Depends(get_analysis_service)):
        return {
            "status": "ok",
            "service": settings.service_name,
            "kpis": [kpi_type.value for kpi_type in analysis_service.supported_types()],
        }

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(analysis.router, prefix="/v1", tags=["analysis"])

    return app


app = create_app()
