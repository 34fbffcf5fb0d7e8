"""FastAPI receiver for get-sli.triggered CloudEvents.

Events arrive in structured mode (``application/cloudevents+json``). Each
accepted event starts one GetSLIWorkflow; the workflow ID is derived from the
event ID so redelivered events don't start a second evaluation.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, ValidationError
from temporalio.client import Client  # noqa: TC002
from temporalio.common import WorkflowIDConflictPolicy

from sli_service.models import (
    GET_SLI_TRIGGERED,
    CloudEvent,
    GetSLIInput,
    GetSLITriggeredEventData,
    SLIServiceSettings,
    get_settings,
)
from sli_service.temporal import create_client
from sli_service.workflows import GetSLIWorkflow

logger = logging.getLogger("sli_service.api")


class AcceptedResponse(BaseModel):
    workflow_id: str


def workflow_id(event: CloudEvent) -> str:
    return f"get-sli-{event.id}"


def create_app(
    temporal_client: Client | None = None,
    settings: SLIServiceSettings | None = None,
) -> FastAPI:
    """Build the receiver app.

    Without an explicit client, one is connected during startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.temporal_client is None:
            logger.info("Connecting to Temporal at %s", settings.temporal_address)
            app.state.temporal_client = await create_client(
                settings.temporal_address, settings.temporal_namespace
            )
        yield

    app = FastAPI(title="Prometheus SLI Service", lifespan=lifespan)
    app.state.temporal_client = temporal_client
    app.state.settings = settings

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(settings.receiver_path, status_code=202)
    async def receive_event(event: CloudEvent, request: Request) -> AcceptedResponse:
        if event.type != GET_SLI_TRIGGERED:
            raise HTTPException(status_code=400, detail="received unknown event type")
        if not event.shkeptncontext:
            raise HTTPException(
                status_code=400, detail="could not determine keptnContext of input event"
            )

        try:
            data = GetSLITriggeredEventData.model_validate(event.data)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=f"invalid get-sli data: {e}") from e

        client: Client | None = request.app.state.temporal_client
        if client is None:
            raise HTTPException(status_code=503, detail="Temporal client not configured")

        handle = await client.start_workflow(
            GetSLIWorkflow.run,
            GetSLIInput(
                event=event,
                data=data,
                # leave room for connect + read on top of the HTTP timeout
                fetch_timeout_sec=settings.query_timeout_sec * 2,
            ),
            id=workflow_id(event),
            task_queue=settings.task_queue,
            id_conflict_policy=WorkflowIDConflictPolicy.USE_EXISTING,
        )
        logger.info(
            "Started %s for %s/%s/%s (%d indicators)",
            handle.id,
            data.project,
            data.stage,
            data.service,
            len(data.get_sli.indicators),
        )
        return AcceptedResponse(workflow_id=handle.id)

    return app
