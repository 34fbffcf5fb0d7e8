"""CloudEvent envelope and ``get-sli`` event payloads.

Wire format follows the Keptn v0.2.0 event format: top-level keys are
snake/lower case, the task-specific block lives under ``get-sli`` and uses
camelCase keys. Models accept both the wire aliases and field names.
"""

import uuid
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from whenever import Instant

from .sli import SLIFilter, SLIResult  # noqa: TC001

SERVICE_NAME = "prometheus-sli-service"

GET_SLI_TRIGGERED = "sh.keptn.event.get-sli.triggered"
GET_SLI_STARTED = "sh.keptn.event.get-sli.started"
GET_SLI_FINISHED = "sh.keptn.event.get-sli.finished"


class EventStatus(StrEnum):
    SUCCEEDED = "succeeded"
    ERRORED = "errored"


class EventResult(StrEnum):
    PASS = "pass"
    FAIL = "fail"


class CloudEvent(BaseModel):
    """Structured-mode CloudEvent with the Keptn context extensions."""

    model_config = ConfigDict(extra="allow")

    specversion: str = "1.0"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    source: str = SERVICE_NAME
    type: str
    datacontenttype: str = "application/json"
    time: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    shkeptncontext: str | None = None
    triggeredid: str | None = None

    @classmethod
    def reply_to(
        cls, trigger: "CloudEvent", event_type: str, data: dict[str, Any]
    ) -> "CloudEvent":
        """Build an outbound event correlated with ``trigger``."""
        return cls(
            type=event_type,
            time=Instant.now().format_iso(),
            data=data,
            shkeptncontext=trigger.shkeptncontext,
            triggeredid=trigger.id,
        )


class EventData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project: str
    stage: str
    service: str
    labels: dict[str, str] | None = None
    status: EventStatus = EventStatus.SUCCEEDED
    result: EventResult = EventResult.PASS
    message: str = ""


class GetSLITriggered(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sli_provider: str = Field(alias="sliProvider")
    start: str
    end: str
    indicators: list[str] = Field(default_factory=list)
    custom_filters: list[SLIFilter] = Field(default_factory=list, alias="customFilters")


class GetSLITriggeredEventData(EventData):
    get_sli: GetSLITriggered = Field(alias="get-sli")


class GetSLIStartedEventData(EventData):
    pass


class GetSLIFinished(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: str
    end: str
    indicator_values: list[SLIResult] = Field(default_factory=list, alias="indicatorValues")


class GetSLIFinishedEventData(EventData):
    get_sli: GetSLIFinished = Field(alias="get-sli")
