"""Prometheus metrics for the PayFi credit service.

Metrics are organized into two categories:

Business Metrics (for Product/Risk):
- payfi_assessment_total: Assessments by outcome (scored, new_user)
- payfi_credit_limit_bucket: Assessed credit limits by bucket
- payfi_credit_limit_native: Assessed credit limits (sum/count give the average)
- payfi_behavior_adjustment_total: Behavior adjustments by event type

Technical Metrics (for Engineering/SRE):
- payfi_assessment_latency_seconds: Assessment latency
- payfi_transaction_fetch_total: Transaction history fetches by status
- payfi_transaction_fetch_failures_total: Transaction source failures
- payfi_transaction_fetch_latency_seconds: Transaction source latency
- payfi_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, Summary, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from payfi_credit.service.scoring.credit_limit import get_credit_limit_bucket


# =============================================================================
# Business Metrics
# =============================================================================

assessment_total = Counter(
    "payfi_assessment_total",
    "Total number of credit assessments",
    ["outcome"],  # scored, new_user
)

credit_limit_bucket = Counter(
    "payfi_credit_limit_bucket",
    "Assessed credit limits by bucket",
    ["bucket"],
)

credit_limit_summary = Summary(
    "payfi_credit_limit_native",
    "Assessed credit limits in native units",
)

behavior_adjustment_total = Counter(
    "payfi_behavior_adjustment_total",
    "Total number of behavior-driven credit adjustments",
    ["type"],
)


# =============================================================================
# Technical Metrics
# =============================================================================

assessment_latency = Histogram(
    "payfi_assessment_latency_seconds",
    "Assessment request latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

transaction_fetch_latency = Histogram(
    "payfi_transaction_fetch_latency_seconds",
    "Transaction source fetch latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

transaction_fetch_failures = Counter(
    "payfi_transaction_fetch_failures_total",
    "Total number of transaction source failures",
    ["error_type"],  # timeout, error, upstream
)

transaction_fetch_total = Counter(
    "payfi_transaction_fetch_total",
    "Total number of transaction source requests",
    ["status"],  # success, failure
)

http_requests_total = Counter(
    "payfi_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "payfi_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_assessment(credit_limit: float, transaction_count: int) -> None:
    """Record an assessment in metrics."""
    outcome = "scored" if transaction_count > 0 else "new_user"
    assessment_total.labels(outcome=outcome).inc()

    credit_limit_summary.observe(credit_limit)

    credit_limit_bucket.labels(bucket=get_credit_limit_bucket(credit_limit)).inc()


def record_behavior_adjustment(behavior_type: str) -> None:
    """Record a behavior adjustment."""
    behavior_adjustment_total.labels(type=behavior_type).inc()


@contextmanager
def track_assessment_latency() -> Generator[None, None, None]:
    """Context manager to track assessment latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        assessment_latency.observe(duration)


@contextmanager
def track_transaction_fetch_latency() -> Generator[None, None, None]:
    """Context manager to track transaction source latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        transaction_fetch_latency.observe(duration)


def record_transaction_fetch_success() -> None:
    """Record a successful transaction history fetch."""
    transaction_fetch_total.labels(status="success").inc()


def record_transaction_fetch_failure(error_type: str) -> None:
    """Record a transaction history fetch failure."""
    transaction_fetch_total.labels(status="failure").inc()
    transaction_fetch_failures.labels(error_type=error_type).inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
