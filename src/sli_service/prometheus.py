"""Prometheus instant-query client and scalar extraction.

Response shape of ``GET /api/v1/query``:

    {
        "status": "success",
        "data": {
            "resultType": "vector",
            "result": [{"metric": {}, "value": [1571649085, "0.20111420612813372"]}]
        }
    }

An empty ``result`` vector is how Prometheus reports "no qualifying samples"
(e.g. an error-rate query when there were no errors). It is read as 0.0.
"""

import logging
from typing import Any, Self
from urllib.parse import quote_plus

import httpx
from whenever import Instant  # noqa: TC002

from sli_service.errors import MalformedResponseError, NonSuccessStatusError, TransportError
from sli_service.models import PrometheusCredentials  # noqa: TC001

logger = logging.getLogger(__name__)

QUERY_PATH = "/api/v1/query"


def parse_or_default(raw: Any, default: float = 0.0) -> float:
    """Parse a sample value, falling back to ``default`` when it isn't numeric.

    Sample values arrive as strings (``"0.2"``, ``"NaN"``, ``"+Inf"``) or,
    from some Prometheus-compatible backends, as bare JSON numbers. Anything
    that does not parse is treated as absent data rather than a fault.
    """
    try:
        return float(str(raw))
    except ValueError:
        return default


def extract_scalar(payload: Any) -> float:
    """Return the first sample value of an instant-vector response."""
    if not isinstance(payload, dict):
        raise MalformedResponseError("query response is not a JSON object")

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise MalformedResponseError("query response 'data' is not an object")

    result = data.get("result") or []
    if not isinstance(result, list):
        raise MalformedResponseError("query response 'data.result' is not a list")
    if not result:
        return 0.0

    first = result[0]
    if not isinstance(first, dict):
        raise MalformedResponseError("query result entry is not an object")

    value = first.get("value") or []
    if not isinstance(value, list):
        raise MalformedResponseError("query result 'value' is not a list")
    if len(value) < 2:
        return 0.0

    return parse_or_default(value[1])


def generate_prometheus_url(credentials: PrometheusCredentials) -> str:
    """Embed credentials as userinfo; assume https when no scheme is given."""
    userinfo = ""
    if credentials.user and credentials.password:
        userinfo = f"{quote_plus(credentials.user)}:{quote_plus(credentials.password)}@"

    url = credentials.url
    for scheme in ("https://", "http://"):
        if url.startswith(scheme):
            host = url.removeprefix(scheme)
            break
    else:
        scheme, host = "https://", url

    return f"{scheme}{userinfo}{host}".replace(" ", "")


class PrometheusClient:
    """Runs instant queries against one Prometheus API endpoint.

    Usage:
        async with PrometheusClient(url, timeout=10.0) as client:
            value = await client.fetch_scalar(query, window.end)
    """

    def __init__(
        self,
        api_url: str,
        *,
        timeout: float = 30.0,
        verify_tls: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, verify=verify_tls, transport=transport)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def query(self, query: str, time: int) -> Any:
        """Execute an instant query evaluated at ``time`` (Unix seconds)."""
        try:
            response = await self._client.get(
                f"{self.api_url}{QUERY_PATH}",
                params={"query": query, "time": str(time)},
                headers={"Content-Type": "application/json"},
            )
        except (httpx.TransportError, httpx.InvalidURL) as e:
            raise TransportError(f"could not reach Prometheus: {e}") from e

        if response.status_code != 200:
            logger.warning("Query failed: %s, status: %d", query, response.status_code)
            raise NonSuccessStatusError(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"query response is not valid JSON: {e}") from e

    async def fetch_scalar(self, query: str, end: Instant) -> float:
        """Evaluate ``query`` at ``end`` and return its single scalar value."""
        payload = await self.query(query, end.timestamp())
        return extract_scalar(payload)
