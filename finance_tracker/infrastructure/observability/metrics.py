"""Prometheus metrics for dashboard builds, storage and auth health"""

from prometheus_client import Counter, Histogram

# Dashboard metrics
dashboard_counter = Counter(
    "finance_dashboard_total",
    "Dashboard summaries computed",
    ["outcome"],  # ok | storage_error
)

debt_projection_counter = Counter(
    "finance_debt_projection_total",
    "Per-debt payoff projections by result",
    ["status"],  # paid_off | unpayable | exceeds_horizon
)

savings_rate_histogram = Histogram(
    "finance_savings_rate_percent",
    "Current-month savings rate reported on the dashboard",
    buckets=[0, 5, 10, 20, 30, 50, 75, 100],
)

# Collaborator failures
snapshot_fetch_failures_counter = Counter(
    "snapshot_fetch_failures_total",
    "Failed storage fetches while assembling a snapshot",
)

auth_failures_counter = Counter(
    "auth_failures_total",
    "Requests rejected or failed at authentication",
    ["reason"],  # missing_token | invalid_token | provider_error
)

invalid_records_counter = Counter(
    "invalid_stored_records_total",
    "Stored rows skipped because they failed normalisation",
    ["table"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_dashboard(savings_rate: float, projection_statuses: list[str]) -> None:
    """Record a successful dashboard build and the payoff status of each debt"""
    dashboard_counter.labels(outcome="ok").inc()
    savings_rate_histogram.observe(savings_rate)

    for status in projection_statuses:
        debt_projection_counter.labels(status=status).inc()
