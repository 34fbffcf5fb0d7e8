"""SLI worker entry point.

Starts a Temporal worker that runs GetSLIWorkflow and its activities.

Usage:
    python -m sli_service.worker
    # or
    sli-service run worker

Environment variables:
    TEMPORAL_ADDRESS       - Temporal server address (default: localhost:7233)
    TEMPORAL_NAMESPACE     - Temporal namespace (default: default)
    SLI_TASK_QUEUE         - Task queue name (default: sli-task-queue)
    CONFIGURATION_SERVICE  - Configuration service holding prometheus/sli.yaml
    EVENTBROKER            - Event broker for started/finished events
    POD_NAMESPACE          - Namespace of prometheus-credentials-<project> secrets
    SLI_QUERY_TIMEOUT_SEC  - Per-query HTTP timeout (default: 30)
    SLI_VERIFY_TLS         - Verify Prometheus TLS certificates (default: true)
"""

import asyncio
import logging
import signal

from sli_service.models import get_settings
from sli_service.temporal import create_client, create_worker

logger = logging.getLogger(__name__)


async def run_worker() -> None:
    """Run the SLI worker until interrupted."""
    settings = get_settings()

    logger.info(
        "Starting SLI worker: address=%s namespace=%s task_queue=%s",
        settings.temporal_address,
        settings.temporal_namespace,
        settings.task_queue,
    )
    if not settings.verify_tls:
        logger.warning("TLS verification towards Prometheus is disabled")

    client = await create_client(settings.temporal_address, settings.temporal_namespace)
    worker = create_worker(client, settings.task_queue)
    logger.info("SLI worker polling for tasks")
    await worker.run()


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    loop = asyncio.new_event_loop()

    # Graceful shutdown on SIGTERM/SIGINT
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, lambda: loop.stop())

    try:
        loop.run_until_complete(run_worker())
    except KeyboardInterrupt:
        logger.info("Worker interrupted, shutting down")
    except RuntimeError:
        # loop.stop() from a signal handler interrupts run_until_complete
        logger.info("Worker stopped by signal")
    finally:
        loop.close()
        logger.info("Worker stopped")


if __name__ == "__main__":
    main()
