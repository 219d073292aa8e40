"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, List
from fastapi.testclient import TestClient
from fintrack_analytics.api.main import create_app
from fintrack_analytics.api.dependencies import get_analysis_service, get_today, get_transaction_client
from fintrack_analytics.domain.analysis import FinancialAnalysisService
from fintrack_analytics.domain.models import Category, Transaction
from helpers import TODAY, FakeTransactionSource, expense, income


@pytest.fixture
def today() -> Callable[[], date]:
    """Clock pinned to TODAY"""
    return lambda: TODAY


@pytest.fixture
def analysis_service(today: Callable[[], date]) -> FinancialAnalysisService:
    return FinancialAnalysisService.default(today=today)


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Two months of salary, rent and groceries"""
    return [
        income("3000.00", days_ago=5, category=Category.SALARY),
        income("3000.00", days_ago=35, category=Category.SALARY),
        expense("800.00", days_ago=10, category=Category.HOUSING),
        expense("800.00", days_ago=40, category=Category.HOUSING),
        expense("300.00", days_ago=12, category=Category.ALIMENTATION),
        expense("200.00", days_ago=45, category=Category.ALIMENTATION),
    ]


@pytest.fixture
def fake_source(sample_transactions: List[Transaction]) -> FakeTransactionSource:
    return FakeTransactionSource(sample_transactions)


@pytest.fixture
def client(
    fake_source: FakeTransactionSource,
    analysis_service: FinancialAnalysisService,
    today: Callable[[], date],
) -> TestClient:
    """Create FastAPI test client backed by the in-memory transaction source"""
    app = create_app()
    app.dependency_overrides[get_transaction_client] = lambda: fake_source
    app.dependency_overrides[get_analysis_service] = lambda: analysis_service
    app.dependency_overrides[get_today] = lambda: today
    return TestClient(app)
