"""Pydantic models for the Prometheus SLI service.

- sli: label filters, query context, per-indicator results
- events: CloudEvent envelope and get-sli event payloads
- activity_inputs: one input model per Temporal activity
- config: process settings read from the environment
"""

from .activity_inputs import (
    FetchCustomQueriesInput,
    FetchSLIValueInput,
    ResolveEndpointInput,
    SendEventInput,
)
from .config import DEFAULT_PROMETHEUS_URL, SLI_RESOURCE_URI, SLIServiceSettings, get_settings
from .events import (
    GET_SLI_FINISHED,
    GET_SLI_STARTED,
    GET_SLI_TRIGGERED,
    SERVICE_NAME,
    CloudEvent,
    EventData,
    EventResult,
    EventStatus,
    GetSLIFinished,
    GetSLIFinishedEventData,
    GetSLIStartedEventData,
    GetSLITriggered,
    GetSLITriggeredEventData,
)
from .sli import (
    INFINITE_MESSAGE,
    NAN_MESSAGE,
    PROMETHEUS_PROVIDER,
    PrometheusCredentials,
    QueryContext,
    SLIFilter,
    SLIResult,
)
from .workflow_inputs import GetSLIInput

__all__ = [
    # Activity inputs
    "FetchCustomQueriesInput",
    "FetchSLIValueInput",
    "ResolveEndpointInput",
    "SendEventInput",
    # Config
    "DEFAULT_PROMETHEUS_URL",
    "SLI_RESOURCE_URI",
    "SLIServiceSettings",
    "get_settings",
    # Events
    "GET_SLI_FINISHED",
    "GET_SLI_STARTED",
    "GET_SLI_TRIGGERED",
    "SERVICE_NAME",
    "CloudEvent",
    "EventData",
    "EventResult",
    "EventStatus",
    "GetSLIFinished",
    "GetSLIFinishedEventData",
    "GetSLIStartedEventData",
    "GetSLITriggered",
    "GetSLITriggeredEventData",
    # SLI
    "INFINITE_MESSAGE",
    "NAN_MESSAGE",
    "PROMETHEUS_PROVIDER",
    "PrometheusCredentials",
    "QueryContext",
    "SLIFilter",
    "SLIResult",
    # Workflow inputs
    "GetSLIInput",
]
