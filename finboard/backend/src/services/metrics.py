"""Prometheus metric definitions for dashboard data access."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

data_fetch_failures_total = Counter(
    "data_fetch_failures_total",
    "Store failures escalated to callers, by accessor.",
    labelnames=["operation"],
)

card_metric_degraded_total = Counter(
    "card_metric_degraded_total",
    "Card summary sub-metrics that fell back to a zero value.",
    labelnames=["metric"],
)

query_duration_seconds = Histogram(
    "query_duration_seconds",
    "Time spent executing a dashboard accessor.",
    labelnames=["operation"],
)

__all__ = [
    "card_metric_degraded_total",
    "data_fetch_failures_total",
    "query_duration_seconds",
]
