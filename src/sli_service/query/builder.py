"""Translate SLI names into PromQL queries.

Built-in indicators:
  throughput            sum(rate(http_requests_total{F}[D]))
  error_rate            non-2xx request rate / total request rate
  request_latency_pNN   histogram_quantile over http_response_time_milliseconds_bucket

``F`` is the filter expression from ``compute_filter_expression`` and ``D``
the window duration (``"<seconds>s"``). A custom query template configured
for an indicator replaces the built-in query of the same name.
"""

import re
from collections.abc import Callable

from sli_service.errors import UnsupportedIndicatorError
from sli_service.models import QueryContext
from sli_service.query.filters import compute_filter_expression, strip_quotes
from sli_service.query.timeframe import TimeWindow

THROUGHPUT = "throughput"
ERROR_RATE = "error_rate"
REQUEST_LATENCY_P50 = "request_latency_p50"
REQUEST_LATENCY_P90 = "request_latency_p90"
REQUEST_LATENCY_P95 = "request_latency_p95"


def throughput_query(filter_expression: str, duration: str) -> str:
    return f"sum(rate(http_requests_total{{{filter_expression}}}[{duration}]))"


def error_rate_query(filter_expression: str, duration: str) -> str:
    return (
        f"sum(rate(http_requests_total{{{filter_expression},status!~'2..'}}[{duration}]))"
        f"/sum(rate(http_requests_total{{{filter_expression}}}[{duration}]))"
    )


def request_latency_query(percentile: str, filter_expression: str, duration: str) -> str:
    """Quantile query; ``percentile`` is the two digits after ``0.``."""
    return (
        f"histogram_quantile(0.{percentile},"
        f"sum(rate(http_response_time_milliseconds_bucket{{{filter_expression}}}[{duration}]))"
        "by(le))"
    )


BUILTIN_QUERIES: dict[str, Callable[[str, str], str]] = {
    THROUGHPUT: throughput_query,
    ERROR_RATE: error_rate_query,
    REQUEST_LATENCY_P50: lambda f, d: request_latency_query("50", f, d),
    REQUEST_LATENCY_P90: lambda f, d: request_latency_query("90", f, d),
    REQUEST_LATENCY_P95: lambda f, d: request_latency_query("95", f, d),
}


def template_placeholders(context: QueryContext, window: TimeWindow) -> dict[str, str]:
    """Values substituted for ``$NAME`` tokens in custom query templates.

    Each label filter contributes ``$<key>`` with its quote-stripped value;
    the identity and duration placeholders take precedence over filter keys.
    """
    placeholders = {f.key: strip_quotes(f.value) for f in context.filters}
    placeholders.update(
        {
            "SERVICE": context.service,
            "PROJECT": context.project,
            "STAGE": context.stage,
            "DURATION_SECONDS": window.duration,
        }
    )
    return placeholders


def render_template(template: str, placeholders: dict[str, str]) -> str:
    """Substitute ``$NAME`` tokens in a single pass, longest name first.

    Tokens with no matching placeholder are left untouched.
    """
    if not placeholders:
        return template
    names = sorted(placeholders, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(f"${name}") for name in names))
    return pattern.sub(lambda match: placeholders[match.group(0)[1:]], template)


class QueryBuilder:
    """Builds queries for every indicator requested under one context."""

    def __init__(self, context: QueryContext) -> None:
        self.context = context
        self.filter_expression = compute_filter_expression(context)

    def build(self, indicator: str, window: TimeWindow) -> str:
        template = self.context.custom_queries.get(indicator)
        if template is not None:
            return render_template(template, template_placeholders(self.context, window))

        builtin = BUILTIN_QUERIES.get(indicator)
        if builtin is None:
            raise UnsupportedIndicatorError(indicator)
        return builtin(self.filter_expression, window.duration)


def build_query(indicator: str, context: QueryContext, window: TimeWindow) -> str:
    return QueryBuilder(context).build(indicator, window)
