"""Prometheus metrics definitions for TastyPath."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "tastypath_http_requests_total",
    "Total number of HTTP requests processed by the TastyPath API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "tastypath_http_request_duration_seconds",
    "Latency of HTTP requests processed by the TastyPath API",
    ["method", "path"],
)

PLAN_AGGREGATIONS = Counter(
    "tastypath_plan_aggregations_total",
    "Number of weekly plans aggregated into shopping lists by result",
    ["result"],
)

INGREDIENT_LINES = Counter(
    "tastypath_ingredient_lines_total",
    "Number of ingredient lines processed by parse outcome",
    ["result"],
)

BUDGET_ADJUSTMENTS = Counter(
    "tastypath_budget_adjustments_total",
    "Number of shopping list reads whose prices were scaled down to the weekly budget",
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "PLAN_AGGREGATIONS",
    "INGREDIENT_LINES",
    "BUDGET_ADJUSTMENTS",
]
