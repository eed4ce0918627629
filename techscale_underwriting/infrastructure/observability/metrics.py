"""Prometheus metrics for monitoring decisions, offers, sponsor matches and notification delivery"""

from typing import Optional
from prometheus_client import Counter, Histogram

# Underwriting metrics
decision_counter = Counter(
    "underwriting_decision_total",
    "Underwriting decisions made",
    ["decision"],  # auto-approve | manual-review | decline
)

risk_tier_counter = Counter(
    "underwriting_risk_tier_total",
    "Assessments by risk tier",
    ["tier"],
)

offer_counter = Counter(
    "loan_offer_total",
    "Loan offers generated by type",
    ["offer_type"],  # loan | isa | hybrid
)

sponsor_match_counter = Counter(
    "sponsor_match_total",
    "Sponsor matching outcomes",
    ["outcome"],  # matched | no_match
)

# Notification metrics
notification_latency_histogram = Histogram(
    "notification_latency_seconds",
    "Notification dispatcher response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

notification_failure_counter = Counter(
    "notification_failures_total",
    "Failed notification deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_underwriting(decision: str, risk_tier: str, offer_type: Optional[str]) -> None:
    """Record one underwriting run"""
    decision_counter.labels(decision=decision).inc()
    risk_tier_counter.labels(tier=risk_tier).inc()
    if offer_type is not None:
        offer_counter.labels(offer_type=offer_type).inc()


def record_sponsor_match(matched: bool) -> None:
    sponsor_match_counter.labels(outcome="matched" if matched else "no_match").inc()
