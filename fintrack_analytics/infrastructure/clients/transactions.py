"""Transaction service HTTP client for fetching a user's transaction history"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

import httpx

from fintrack_analytics.config import settings
from fintrack_analytics.domain.exceptions import DomainException, TransactionSourceError
from fintrack_analytics.domain.models import AnalysisPeriod, Category, Transaction
from fintrack_analytics.infrastructure.observability.metrics import transaction_fetch_latency_histogram


class TransactionClient:
    """Client for the external transaction service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.transactions_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def fetch_transactions(self, user_id: str, period: AnalysisPeriod) -> List[Transaction]:
        """
        Fetch a user's transactions dated within period.

        Raises:
            TransactionSourceError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with transaction_fetch_latency_histogram.time():
                    response = await client.get(
                        f"{self.base_url}/transactions",
                        params={
                            "user_id": user_id,
                            "start": period.start.isoformat(),
                            "end": period.end.isoformat(),
                        },
                    )
                response.raise_for_status()
                data = response.json()

                return [parse_transaction(txn) for txn in data.get("transactions", [])]

            except httpx.TimeoutException as e:
                raise TransactionSourceError(f"Transaction service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise TransactionSourceError(f"Transaction service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise TransactionSourceError(f"Transaction service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, AttributeError, InvalidOperation, DomainException) as e:
                raise TransactionSourceError(f"Invalid transaction data from service: {e}") from e


def parse_transaction(raw: Dict[str, Any]) -> Transaction:
    """
    Build a Transaction from its wire form.

    Amounts arrive as strings (or integers) to keep them exact; floats are
    refused rather than silently rounded.
    """
    amount = raw["amount"]
    if isinstance(amount, float):
        raise TypeError(f"amount must be a string or integer, got {amount!r}")
    category = raw.get("category")
    return Transaction(
        amount=Decimal(str(amount)),
        date=date.fromisoformat(raw["date"]),
        category=Category.from_string(category) if category is not None else None,
    )
