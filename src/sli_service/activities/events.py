"""Event emission to the event broker."""

import httpx
from temporalio import activity

from sli_service.models import CloudEvent, SendEventInput, get_settings


def broker_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=10.0)


async def post_event(client: httpx.AsyncClient, broker_url: str, event: CloudEvent) -> None:
    response = await client.post(
        broker_url,
        content=event.model_dump_json(exclude_none=True),
        headers={"Content-Type": "application/cloudevents+json"},
    )
    response.raise_for_status()


@activity.defn
async def send_event(input: SendEventInput) -> str:
    """Send an event correlated with the triggering event.

    Returns:
        ID of the emitted event
    """
    settings = get_settings()
    event = CloudEvent.reply_to(input.trigger, input.event_type, input.data)
    activity.logger.info(f"Sending {event.type} for triggered event {input.trigger.id}")

    async with broker_client() as client:
        await post_event(client, settings.event_broker, event)
    return event.id
