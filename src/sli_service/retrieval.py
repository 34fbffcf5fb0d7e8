"""Build-and-fetch of SLI values outside of any Temporal context.

The Temporal activities and the CLI both go through these helpers, so an
indicator is evaluated the same way whichever surface triggered it.
"""

import logging

from sli_service.errors import IndicatorError
from sli_service.models import QueryContext, SLIResult
from sli_service.prometheus import PrometheusClient  # noqa: TC001
from sli_service.query import TimeWindow, build_query

logger = logging.getLogger(__name__)


async def retrieve_sli_value(
    client: PrometheusClient,
    indicator: str,
    context: QueryContext,
    start: str,
    end: str,
) -> float:
    """Evaluate one indicator over [start, end] at the window end."""
    window = TimeWindow.parse(start, end)
    query = build_query(indicator, context, window)
    logger.debug("Query for %s: %s", indicator, query)
    return await client.fetch_scalar(query, window.end)


async def retrieve_sli_results(
    client: PrometheusClient,
    indicators: list[str],
    context: QueryContext,
    start: str,
    end: str,
) -> list[SLIResult]:
    """Evaluate indicators sequentially, in request order.

    A failing indicator yields a failed result and never stops the batch.
    """
    results = []
    for indicator in indicators:
        logger.info("Fetching indicator: %s", indicator)
        try:
            value = await retrieve_sli_value(client, indicator, context, start, end)
        except IndicatorError as e:
            logger.warning("Indicator %s failed: %s", indicator, e)
            results.append(SLIResult.from_error(indicator, str(e)))
            continue
        results.append(SLIResult.from_value(indicator, value))
    return results
