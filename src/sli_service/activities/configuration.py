"""Custom SLI query lookup from the configuration service.

Projects override or extend the built-in queries with a ``prometheus/sli.yaml``
resource:

    spec_version: '1.0'
    indicators:
      throughput: sum(rate(my_requests_total{job='$SERVICE-$PROJECT-$STAGE'}[$DURATION_SECONDS]))

The resource is read at project, stage and service level; a later level
overrides indicators of an earlier one. A level without the resource is
skipped.
"""

import base64
import binascii
import logging
from urllib.parse import quote

import httpx
import yaml
from temporalio import activity

from sli_service.errors import ConfigurationError, SLIError
from sli_service.models import SLI_RESOURCE_URI, FetchCustomQueriesInput, get_settings

from .common import to_application_error

logger = logging.getLogger(__name__)


def resource_paths(project: str, stage: str, service: str) -> list[str]:
    """Resource URLs from the least to the most specific level."""
    uri = quote(SLI_RESOURCE_URI, safe="")
    return [
        f"/v1/project/{project}/resource/{uri}",
        f"/v1/project/{project}/stage/{stage}/resource/{uri}",
        f"/v1/project/{project}/stage/{stage}/service/{service}/resource/{uri}",
    ]


def parse_sli_config(content: str) -> dict[str, str]:
    """Extract the ``indicators`` mapping of an SLI config document."""
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid SLI configuration: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigurationError("invalid SLI configuration: expected a mapping")

    indicators = document.get("indicators") or {}
    if not isinstance(indicators, dict):
        raise ConfigurationError("invalid SLI configuration: 'indicators' must be a mapping")
    return {str(name): str(query) for name, query in indicators.items()}


def configuration_client(base_url: str) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, timeout=10.0)


async def fetch_resource(client: httpx.AsyncClient, path: str) -> str | None:
    """Return the decoded resource content, or ``None`` if it doesn't exist."""
    try:
        response = await client.get(path)
    except httpx.TransportError as e:
        raise ConfigurationError(f"could not reach the configuration service: {e}") from e

    if response.status_code == 404:
        return None
    if response.status_code != 200:
        raise ConfigurationError(
            f"could not retrieve {SLI_RESOURCE_URI}: HTTP {response.status_code}"
        )

    try:
        encoded = response.json()["resourceContent"]
        return base64.b64decode(encoded).decode()
    except (ValueError, KeyError, TypeError, binascii.Error) as e:
        raise ConfigurationError(f"could not decode {SLI_RESOURCE_URI}: {e}") from e


async def load_custom_queries(
    client: httpx.AsyncClient,
    project: str,
    stage: str,
    service: str,
) -> dict[str, str]:
    queries: dict[str, str] = {}
    for path in resource_paths(project, stage, service):
        content = await fetch_resource(client, path)
        if content is not None:
            queries.update(parse_sli_config(content))
    logger.info("Found %d custom SLI queries for %s/%s/%s", len(queries), project, stage, service)
    return queries


@activity.defn
async def fetch_custom_queries(input: FetchCustomQueriesInput) -> dict[str, str]:
    """Fetch the per-project custom SLI queries.

    Args:
        input: FetchCustomQueriesInput with project, stage and service

    Returns:
        Mapping of indicator name to query template (empty when none configured)
    """
    settings = get_settings()
    activity.logger.info("Checking for custom SLI queries")
    try:
        async with configuration_client(settings.configuration_service) as client:
            return await load_custom_queries(client, input.project, input.stage, input.service)
    except SLIError as e:
        activity.logger.error(f"Failed to get custom queries for project {input.project}: {e}")
        raise to_application_error(e) from e
