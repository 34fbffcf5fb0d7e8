"""Temporal client and worker utilities.

Clients and workers are created with the Pydantic data converter so the
workflow and activity input models round-trip as models, not dicts.

Usage:
    from sli_service.temporal import create_client, create_worker

    client = await create_client("localhost:7233")
    worker = create_worker(client, "sli-task-queue")
"""

from temporalio.client import Client
from temporalio.contrib.pydantic import pydantic_data_converter
from temporalio.worker import Worker
from temporalio.worker.workflow_sandbox import SandboxedWorkflowRunner

from sli_service.activities import (
    fetch_custom_queries,
    fetch_sli_value,
    resolve_prometheus_endpoint,
    send_event,
)
from sli_service.workflows import GetSLIWorkflow

# Default task queue for SLI workflows
SLI_TASK_QUEUE = "sli-task-queue"

SLI_WORKFLOWS = [GetSLIWorkflow]

SLI_ACTIVITIES = [
    resolve_prometheus_endpoint,
    fetch_custom_queries,
    fetch_sli_value,
    send_event,
]


async def create_client(
    target_host: str = "localhost:7233",
    namespace: str = "default",
) -> Client:
    """Create a Temporal client using the Pydantic data converter.

    Args:
        target_host: Temporal server address (default: localhost:7233)
        namespace: Temporal namespace (default: default)

    Returns:
        Configured Temporal client
    """
    return await Client.connect(
        target_host,
        namespace=namespace,
        data_converter=pydantic_data_converter,
    )


def create_worker(
    client: Client,
    task_queue: str = SLI_TASK_QUEUE,
) -> Worker:
    """Create a Temporal worker with the SLI workflow and activities.

    Args:
        client: Temporal client (must use the Pydantic data converter)
        task_queue: Task queue name (default: sli-task-queue)

    Returns:
        Configured Temporal worker
    """
    return Worker(
        client,
        task_queue=task_queue,
        workflows=SLI_WORKFLOWS,
        activities=SLI_ACTIVITIES,
        workflow_runner=SandboxedWorkflowRunner(
            restrictions=SandboxedWorkflowRunner().restrictions.with_passthrough_modules(
                "sli_service",
            )
        ),
    )
