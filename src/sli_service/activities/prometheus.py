"""SLI value fetching activity.

Builds the query for one indicator and evaluates it against the project's
Prometheus endpoint at the end of the evaluation window.
"""

from temporalio import activity

from sli_service.errors import SLIError
from sli_service.models import FetchSLIValueInput, SLIResult, get_settings
from sli_service.prometheus import PrometheusClient
from sli_service.retrieval import retrieve_sli_value

from .common import to_application_error


@activity.defn
async def fetch_sli_value(input: FetchSLIValueInput) -> SLIResult:
    """Fetch a single indicator from Prometheus.

    Indicator errors (unsupported name, bad timestamps, unreachable backend,
    non-200 status) are raised as non-retryable failures. A NaN value comes
    back as a failed result.

    Args:
        input: FetchSLIValueInput with endpoint, indicator, query context and window

    Returns:
        SLIResult for the indicator
    """
    settings = get_settings()
    activity.logger.info(f"Fetching indicator: {input.indicator}")

    try:
        async with PrometheusClient(
            input.api_url,
            timeout=settings.query_timeout_sec,
            verify_tls=settings.verify_tls,
        ) as client:
            value = await retrieve_sli_value(
                client, input.indicator, input.context, input.start, input.end
            )
    except SLIError as e:
        activity.logger.warning(f"Indicator {input.indicator} failed: {e}")
        raise to_application_error(e) from e

    result = SLIResult.from_value(input.indicator, value)
    activity.logger.info(
        f"Indicator {input.indicator}: value={result.value} success={result.success}"
    )
    return result
