"""Pydantic models for workflow inputs.

Each workflow takes a single Pydantic model as its input parameter. Clients
and workers must be created with the Pydantic data converter (see
``sli_service.temporal``) for these to round-trip.
"""

from pydantic import BaseModel, Field

from .events import CloudEvent, GetSLITriggeredEventData  # noqa: TC001


class GetSLIInput(BaseModel):
    """Input for GetSLIWorkflow: the triggering event and its parsed payload."""

    event: CloudEvent = Field(description="The get-sli.triggered event being answered")
    data: GetSLITriggeredEventData
    fetch_timeout_sec: float = Field(
        default=60.0,
        gt=0,
        description="start_to_close timeout of each SLI fetch activity",
    )
