"""Label filter expressions for PromQL selectors.

All quoting rules live here:
- bare values use exact matching and lose any ``'``/``"`` characters
- operator-prefixed values (``=``, ``!=``, ``=~``, ``!~``) pass through with
  ``"`` normalized to ``'``
- an explicit ``job`` filter replaces the default job matcher and every other
  filter
"""

from typing import Self

from sli_service.models import QueryContext, SLIFilter

MATCH_OPERATORS = ("=", "!=", "=~", "!~")
JOB_LABEL = "job"


def strip_quotes(value: str) -> str:
    return value.replace("'", "").replace('"', "")


def has_match_operator(value: str) -> bool:
    return value.startswith(MATCH_OPERATORS)


def default_job(context: QueryContext) -> str:
    return f"{context.service}-{context.project}-{context.stage}"


class FilterExpression:
    """Ordered label matchers rendered as the body of a ``{...}`` selector."""

    def __init__(self) -> None:
        self._matchers: list[str] = []

    def exact(self, key: str, value: str) -> Self:
        self._matchers.append(f"{key}='{value}'")
        return self

    def operator(self, key: str, expression: str) -> Self:
        """Append ``key`` followed by a caller-supplied ``<op><target>``."""
        normalized = expression.replace('"', "'")
        self._matchers.append(f"{key}{normalized}")
        return self

    def add(self, label_filter: SLIFilter) -> Self:
        if has_match_operator(label_filter.value):
            return self.operator(label_filter.key, label_filter.value)
        return self.exact(label_filter.key, strip_quotes(label_filter.value))

    def render(self) -> str:
        return ",".join(self._matchers)

    def __str__(self) -> str:
        return self.render()


def compute_filter_expression(context: QueryContext) -> str:
    """Build the selector body for ``context``, without surrounding braces."""
    job = next((f for f in context.filters if f.key == JOB_LABEL), None)
    if job is not None:
        return FilterExpression().exact(JOB_LABEL, strip_quotes(job.value)).render()

    expression = FilterExpression().exact(JOB_LABEL, default_job(context))
    for label_filter in context.filters:
        expression.add(label_filter)
    return expression.render()
