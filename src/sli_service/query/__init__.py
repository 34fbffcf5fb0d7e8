"""PromQL query construction for SLI indicators."""

from .builder import (
    BUILTIN_QUERIES,
    ERROR_RATE,
    REQUEST_LATENCY_P50,
    REQUEST_LATENCY_P90,
    REQUEST_LATENCY_P95,
    THROUGHPUT,
    QueryBuilder,
    build_query,
    render_template,
    template_placeholders,
)
from .filters import (
    MATCH_OPERATORS,
    FilterExpression,
    compute_filter_expression,
    has_match_operator,
    strip_quotes,
)
from .timeframe import TimeWindow, parse_timestamp

__all__ = [
    "BUILTIN_QUERIES",
    "ERROR_RATE",
    "MATCH_OPERATORS",
    "REQUEST_LATENCY_P50",
    "REQUEST_LATENCY_P90",
    "REQUEST_LATENCY_P95",
    "THROUGHPUT",
    "FilterExpression",
    "QueryBuilder",
    "TimeWindow",
    "build_query",
    "compute_filter_expression",
    "has_match_operator",
    "parse_timestamp",
    "render_template",
    "strip_quotes",
    "template_placeholders",
]
