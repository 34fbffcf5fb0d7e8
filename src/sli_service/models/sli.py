"""SLI domain models: label filters, query context and indicator results.

These cross every Temporal boundary, so they are plain Pydantic models.
"""

import math

from pydantic import BaseModel, ConfigDict, Field

PROMETHEUS_PROVIDER = "prometheus"
NAN_MESSAGE = "SLI value is NaN"
INFINITE_MESSAGE = "SLI value is infinite"


class SLIFilter(BaseModel):
    """A label filter restricting which time series a query matches.

    ``value`` is either a bare literal (exact match) or starts with one of
    the match operators ``=``, ``!=``, ``=~``, ``!~``.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Bare label name")
    value: str = Field(description="Literal value or operator-prefixed expression")


class QueryContext(BaseModel):
    """Everything needed to turn an indicator name into a query."""

    model_config = ConfigDict(frozen=True)

    project: str
    stage: str
    service: str
    filters: list[SLIFilter] = Field(default_factory=list)
    custom_queries: dict[str, str] = Field(
        default_factory=dict,
        description="Indicator name -> query template overriding the built-in query",
    )


class SLIResult(BaseModel):
    """Value (or failure) of one requested indicator."""

    metric: str
    value: float = Field(default=0.0, allow_inf_nan=False)
    success: bool
    message: str = ""

    @classmethod
    def from_value(cls, metric: str, value: float) -> "SLIResult":
        """Wrap a fetched value; NaN and ±Inf count as a failed indicator.

        Non-finite floats have no JSON form, so they never leave this method.
        """
        if math.isnan(value):
            return cls(metric=metric, value=0.0, success=False, message=NAN_MESSAGE)
        if math.isinf(value):
            return cls(metric=metric, value=0.0, success=False, message=INFINITE_MESSAGE)
        return cls(metric=metric, value=value, success=True)

    @classmethod
    def from_error(cls, metric: str, message: str) -> "SLIResult":
        return cls(metric=metric, value=0.0, success=False, message=message)


class PrometheusCredentials(BaseModel):
    """Contents of the ``prometheus-credentials`` secret of a project."""

    url: str
    user: str = ""
    password: str = ""
