"""Unit tests for the get-sli event receiver."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi.testclient import TestClient
from temporalio.common import WorkflowIDConflictPolicy

from sli_service.api import create_app
from sli_service.models import GetSLIInput, SLIServiceSettings


@dataclass
class FakeHandle:
    id: str


@dataclass
class FakeTemporalClient:
    """Records start_workflow calls instead of talking to Temporal."""

    calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = field(default_factory=list)

    async def start_workflow(self, *args: Any, **kwargs: Any) -> FakeHandle:
        self.calls.append((args, kwargs))
        return FakeHandle(id=kwargs["id"])


def _event(**overrides: Any) -> dict[str, Any]:
    event = {
        "specversion": "1.0",
        "id": "6de83495-4f83-481c-8dbe-fcceb2e0243b",
        "source": "lighthouse-service",
        "type": "sh.keptn.event.get-sli.triggered",
        "shkeptncontext": "08735340-6f9e-4b32-97ff-3b6c292bc50i",
        "data": {
            "project": "sockshop",
            "stage": "staging",
            "service": "carts",
            "labels": {"buildId": "42"},
            "get-sli": {
                "sliProvider": "prometheus",
                "start": "2019-10-21T09:11:24Z",
                "end": "2019-10-21T09:16:24Z",
                "indicators": ["throughput", "error_rate"],
                "customFilters": [{"key": "handler", "value": "ItemsController"}],
            },
        },
    }
    event.update(overrides)
    return event


@pytest.fixture
def temporal() -> FakeTemporalClient:
    return FakeTemporalClient()


@pytest.fixture
def settings() -> SLIServiceSettings:
    return SLIServiceSettings(task_queue="test-queue", query_timeout_sec=5.0)


@pytest.fixture
def client(temporal, settings) -> TestClient:
    return TestClient(create_app(temporal_client=temporal, settings=settings))


class TestReceiveEvent:
    def test_starts_workflow(self, client: TestClient, temporal: FakeTemporalClient):
        response = client.post(
            "/",
            json=_event(),
            headers={"Content-Type": "application/cloudevents+json"},
        )

        assert response.status_code == 202
        assert response.json() == {
            "workflow_id": "get-sli-6de83495-4f83-481c-8dbe-fcceb2e0243b"
        }

        ((args, kwargs),) = temporal.calls
        _, workflow_input = args
        assert isinstance(workflow_input, GetSLIInput)
        assert workflow_input.data.get_sli.indicators == ["throughput", "error_rate"]
        assert workflow_input.data.get_sli.custom_filters[0].key == "handler"
        assert workflow_input.event.shkeptncontext == "08735340-6f9e-4b32-97ff-3b6c292bc50i"
        assert workflow_input.fetch_timeout_sec == 10.0
        assert kwargs["task_queue"] == "test-queue"
        assert kwargs["id_conflict_policy"] == WorkflowIDConflictPolicy.USE_EXISTING

    def test_redelivery_reuses_workflow_id(self, client: TestClient, temporal):
        client.post("/", json=_event())
        client.post("/", json=_event())
        ids = [kwargs["id"] for _, kwargs in temporal.calls]
        assert ids[0] == ids[1]

    def test_unknown_event_type(self, client: TestClient, temporal):
        response = client.post("/", json=_event(type="sh.keptn.event.deployment.triggered"))
        assert response.status_code == 400
        assert response.json()["detail"] == "received unknown event type"
        assert temporal.calls == []

    def test_missing_keptn_context(self, client: TestClient, temporal):
        event = _event()
        del event["shkeptncontext"]
        response = client.post("/", json=event)
        assert response.status_code == 400
        assert "keptnContext" in response.json()["detail"]
        assert temporal.calls == []

    def test_invalid_payload(self, client: TestClient, temporal):
        response = client.post("/", json=_event(data={"project": "sockshop"}))
        assert response.status_code == 400
        assert temporal.calls == []

    def test_other_provider_still_starts_workflow(self, client: TestClient, temporal):
        event = _event()
        event["data"]["get-sli"]["sliProvider"] = "dynatrace"
        response = client.post("/", json=event)
        assert response.status_code == 202
        assert len(temporal.calls) == 1


class TestReceiverPath:
    def test_custom_path(self, temporal):
        settings = SLIServiceSettings(receiver_path="/events")
        client = TestClient(create_app(temporal_client=temporal, settings=settings))
        assert client.post("/events", json=_event()).status_code == 202
        assert client.post("/", json=_event()).status_code in (404, 405)


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
