"""Pydantic models for activity inputs.

Every activity takes a single Pydantic model as its input parameter so the
Pydantic data converter can round-trip it through Temporal.

Pattern:
    @activity.defn
    async def my_activity(input: MyActivityInput) -> MyOutput:
        ...
"""

from typing import Any

from pydantic import BaseModel, Field

from .events import CloudEvent  # noqa: TC001
from .sli import QueryContext  # noqa: TC001


class ResolveEndpointInput(BaseModel):
    """Input for resolve_prometheus_endpoint activity."""

    project: str = Field(description="Project whose credentials secret is looked up")


class FetchCustomQueriesInput(BaseModel):
    """Input for fetch_custom_queries activity."""

    project: str
    stage: str
    service: str


class FetchSLIValueInput(BaseModel):
    """Input for fetch_sli_value activity."""

    api_url: str = Field(description="Prometheus base URL, credentials embedded")
    indicator: str
    context: QueryContext
    start: str = Field(description="Window start, RFC3339 or Unix seconds")
    end: str = Field(description="Window end, RFC3339 or Unix seconds")


class SendEventInput(BaseModel):
    """Input for send_event activity."""

    trigger: CloudEvent = Field(description="Event being answered")
    event_type: str
    data: dict[str, Any]
