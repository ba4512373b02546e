"""Prometheus metrics for monitoring score distribution, plan creation and storage health"""

from prometheus_client import Counter, Histogram

# Scoring metrics
credit_score_counter = Counter(
    "lendtrack_credit_score_total",
    "Credit scores computed",
    ["tier"],  # Bronze | Silver | Gold | Platinum | no_history
)

# Plan metrics
plan_created_counter = Counter(
    "lendtrack_plans_created_total",
    "Repayment plans persisted with a new loan",
    ["frequency"],  # weekly | bi_weekly | monthly
)

repayment_counter = Counter(
    "lendtrack_repayments_total",
    "Repayments recorded",
)

# Storage metrics
storage_failures_counter = Counter(
    "storage_failures_total",
    "Failed loan storage reads or writes",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_credit_score(tier: str, has_history: bool) -> None:
    """Record tier distribution; borrowers without history are bucketed separately"""
    credit_score_counter.labels(tier=tier if has_history else "no_history").inc()
