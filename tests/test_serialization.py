"""Serialization tests for the models crossing Temporal and HTTP boundaries.

Temporal round-trip:
    model → pydantic_core.to_json() → TypeAdapter.validate_json() → model

This is exactly what PydanticPayloadConverter does under the hood. Event
payloads additionally have to match the Keptn wire format (``get-sli`` block,
camelCase keys inside it).
"""

import json
import math

import pytest
from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_json
from temporalio.contrib.pydantic import pydantic_data_converter

from sli_service.models import (
    INFINITE_MESSAGE,
    CloudEvent,
    EventResult,
    EventStatus,
    FetchSLIValueInput,
    GetSLIFinished,
    GetSLIFinishedEventData,
    GetSLIInput,
    GetSLITriggeredEventData,
    QueryContext,
    SendEventInput,
    SLIFilter,
    SLIResult,
)
from sli_service.prometheus import extract_scalar

TRIGGERED_DATA = {
    "project": "sockshop",
    "stage": "staging",
    "service": "carts",
    "labels": {"buildId": "42"},
    "get-sli": {
        "sliProvider": "prometheus",
        "start": "2019-10-21T09:11:24Z",
        "end": "2019-10-21T09:16:24Z",
        "indicators": ["throughput", "error_rate"],
        "customFilters": [
            {"key": "handler", "value": "ItemsController"},
            {"key": "method", "value": "!=GET"},
        ],
    },
}


def _temporal_round_trip(model_instance, model_type=None):
    """Simulate the Temporal PydanticPayloadConverter round-trip."""
    if model_type is None:
        model_type = type(model_instance)
    json_bytes = to_json(model_instance)
    restored = TypeAdapter(model_type).validate_json(json_bytes)
    return restored, json_bytes


class TestTriggeredEventData:
    def test_wire_format(self):
        data = GetSLITriggeredEventData.model_validate(TRIGGERED_DATA)
        assert data.get_sli.sli_provider == "prometheus"
        assert data.get_sli.custom_filters == [
            SLIFilter(key="handler", value="ItemsController"),
            SLIFilter(key="method", value="!=GET"),
        ]

    def test_optional_fields(self):
        raw = {**TRIGGERED_DATA, "get-sli": {"sliProvider": "prometheus", "start": "1", "end": "2"}}
        del raw["labels"]
        data = GetSLITriggeredEventData.model_validate(raw)
        assert data.labels is None
        assert data.get_sli.indicators == []
        assert data.get_sli.custom_filters == []

    def test_unknown_keys_ignored(self):
        raw = {**TRIGGERED_DATA, "deployment": {"deploymentURIsLocal": ["http://carts"]}}
        assert GetSLITriggeredEventData.model_validate(raw).service == "carts"


class TestFinishedEventData:
    def _finished(self) -> GetSLIFinishedEventData:
        return GetSLIFinishedEventData(
            project="sockshop",
            stage="staging",
            service="carts",
            labels={"buildId": "42"},
            get_sli=GetSLIFinished(
                start="2019-10-21T09:11:24Z",
                end="2019-10-21T09:16:24Z",
                indicator_values=[
                    SLIResult.from_value("throughput", 42.0),
                    SLIResult.from_error("memory", "unsupported SLI: memory"),
                ],
            ),
        )

    def test_wire_format(self):
        dumped = self._finished().model_dump(mode="json", by_alias=True)
        assert dumped["status"] == "succeeded"
        assert dumped["result"] == "pass"
        assert dumped["get-sli"]["indicatorValues"] == [
            {"metric": "throughput", "value": 42.0, "success": True, "message": ""},
            {
                "metric": "memory",
                "value": 0.0,
                "success": False,
                "message": "unsupported SLI: memory",
            },
        ]

    def test_round_trip(self):
        original = self._finished()
        restored, _ = _temporal_round_trip(original)
        assert restored == original
        assert restored.status == EventStatus.SUCCEEDED
        assert restored.result == EventResult.PASS


class TestCloudEvent:
    def test_reply_correlates_with_trigger(self):
        trigger = CloudEvent(
            id="trigger-1", type="sh.keptn.event.get-sli.triggered", shkeptncontext="ctx-1"
        )
        reply = CloudEvent.reply_to(trigger, "sh.keptn.event.get-sli.started", {"project": "p"})

        assert reply.triggeredid == "trigger-1"
        assert reply.shkeptncontext == "ctx-1"
        assert reply.source == "prometheus-sli-service"
        assert reply.id != trigger.id
        assert reply.time is not None
        assert reply.data == {"project": "p"}

    def test_extensions_preserved(self):
        event = CloudEvent.model_validate(
            {"type": "sh.keptn.event.get-sli.triggered", "gitcommitid": "abc"}
        )
        assert json.loads(event.model_dump_json())["gitcommitid"] == "abc"

    def test_send_event_input_round_trip(self):
        trigger = CloudEvent(id="t", type="sh.keptn.event.get-sli.triggered", shkeptncontext="c")
        original = SendEventInput(
            trigger=trigger,
            event_type="sh.keptn.event.get-sli.finished",
            data={"get-sli": {"indicatorValues": []}},
        )
        restored, _ = _temporal_round_trip(original)
        assert restored == original


class TestActivityInputs:
    def test_fetch_input_round_trip(self):
        original = FetchSLIValueInput(
            api_url="https://user:pw@prometheus",
            indicator="error_rate",
            context=QueryContext(
                project="sockshop",
                stage="dev",
                service="carts",
                filters=[SLIFilter(key="handler", value="=~'Items.*'")],
                custom_queries={"cpu": "avg(cpu{job='$SERVICE'})"},
            ),
            start="1571649084",
            end="1571649085",
        )
        restored, _ = _temporal_round_trip(original)
        assert restored == original
        assert restored.context.filters[0].value == "=~'Items.*'"

    def test_workflow_input_round_trip(self):
        original = GetSLIInput(
            event=CloudEvent(type="sh.keptn.event.get-sli.triggered", shkeptncontext="c"),
            data=GetSLITriggeredEventData.model_validate(TRIGGERED_DATA),
        )
        restored, _ = _temporal_round_trip(original)
        assert restored == original
        assert restored.fetch_timeout_sec == 60.0


class TestSLIResult:
    def test_nan_never_serialized(self):
        result = SLIResult.from_value("error_rate", math.nan)
        restored, json_bytes = _temporal_round_trip(result)
        assert json.loads(json_bytes)["value"] == 0.0
        assert not restored.success
        assert restored.value == 0.0

    def test_infinite_value_is_a_failure(self):
        result = SLIResult.from_value("request_latency_p95", math.inf)
        restored, json_bytes = _temporal_round_trip(result)
        assert json.loads(json_bytes)["value"] == 0.0
        assert not restored.success
        assert restored.message == INFINITE_MESSAGE

    def test_extracted_inf_survives_data_converter(self):
        payload = {"data": {"result": [{"metric": {}, "value": [1571649085, "+Inf"]}]}}
        result = SLIResult.from_value("request_latency_p95", extract_scalar(payload))
        converter = pydantic_data_converter.payload_converter
        (restored,) = converter.from_payloads(converter.to_payloads([result]), [SLIResult])
        assert restored == result
        assert not restored.success

    def test_non_finite_value_rejected_on_construction(self):
        with pytest.raises(ValidationError):
            SLIResult(metric="throughput", value=-math.inf, success=True)
