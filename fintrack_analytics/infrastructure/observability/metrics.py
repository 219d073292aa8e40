"""Prometheus metrics for monitoring KPI computations and the transaction source"""

from prometheus_client import Counter, Histogram

# Analysis metrics
analysis_counter = Counter(
    "fintrack_analysis_total",
    "Total KPI analyses requested",
    ["kpi_type", "outcome"],  # outcome: success | invalid | unsupported | error
)

transactions_analyzed_histogram = Histogram(
    "fintrack_transactions_analyzed",
    "Number of transactions fed into one analysis",
    buckets=[0, 10, 50, 100, 500, 1000, 5000],
)

# Transaction source metrics
transaction_fetch_failures_counter = Counter(
    "transaction_fetch_failures_total",
    "Failed transaction service calls",
)

transaction_fetch_latency_histogram = Histogram(
    "transaction_fetch_latency_seconds",
    "Transaction service response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(kpi_type: str, outcome: str) -> None:
    """Record one analysis outcome"""
    analysis_counter.labels(kpi_type=kpi_type, outcome=outcome).inc()
