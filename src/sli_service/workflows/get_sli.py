"""GetSLIWorkflow - answers one get-sli.triggered event.

1. Skip events addressed to another SLI provider (no events emitted)
2. Emit get-sli.started
3. Resolve the Prometheus endpoint and custom queries; failure here fails
   the whole request
4. Fetch every indicator sequentially, in request order; each indicator
   succeeds or fails on its own
5. Emit get-sli.finished with one result per indicator
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError

with workflow.unsafe.imports_passed_through():
    from sli_service.activities import (
        fetch_custom_queries,
        fetch_sli_value,
        resolve_prometheus_endpoint,
        send_event,
    )
    from sli_service.models import (
        GET_SLI_FINISHED,
        GET_SLI_STARTED,
        PROMETHEUS_PROVIDER,
        CloudEvent,
        EventData,
        EventResult,
        EventStatus,
        FetchCustomQueriesInput,
        FetchSLIValueInput,
        GetSLIFinished,
        GetSLIFinishedEventData,
        GetSLIInput,
        GetSLIStartedEventData,
        GetSLITriggeredEventData,
        QueryContext,
        ResolveEndpointInput,
        SendEventInput,
        SLIResult,
    )

# SLI fetches and lookups are never retried; a failure is reported as-is
NO_RETRY = RetryPolicy(maximum_attempts=1)
EVENT_RETRY = RetryPolicy(maximum_attempts=3)


def failure_message(error: ActivityError) -> str:
    """Human-readable reason of an activity failure."""
    return str(error.cause) if error.cause is not None else str(error)


def finished_event_data(
    data: GetSLITriggeredEventData,
    results: list[SLIResult],
    error: str | None = None,
) -> GetSLIFinishedEventData:
    return GetSLIFinishedEventData(
        project=data.project,
        stage=data.stage,
        service=data.service,
        labels=data.labels,
        status=EventStatus.ERRORED if error else EventStatus.SUCCEEDED,
        result=EventResult.FAIL if error else EventResult.PASS,
        message=error or "",
        get_sli=GetSLIFinished(
            start=data.get_sli.start,
            end=data.get_sli.end,
            indicator_values=results,
        ),
    )


@workflow.defn
class GetSLIWorkflow:
    """Retrieve SLI values from Prometheus for one evaluation."""

    @workflow.run
    async def run(self, input: GetSLIInput) -> GetSLIFinishedEventData | None:
        data = input.data
        if data.get_sli.sli_provider != PROMETHEUS_PROVIDER:
            workflow.logger.info(
                f"Ignoring get-sli event for provider '{data.get_sli.sli_provider}'"
            )
            return None

        try:
            await self._send(
                input.event,
                GET_SLI_STARTED,
                GetSLIStartedEventData(
                    project=data.project,
                    stage=data.stage,
                    service=data.service,
                    labels=data.labels,
                ),
            )
        except ActivityError as e:
            workflow.logger.warning(f"Could not send get-sli.started: {failure_message(e)}")

        try:
            api_url, context = await self._query_context(data)
        except ActivityError as e:
            message = failure_message(e)
            workflow.logger.error(f"Retrieving Prometheus metrics failed: {message}")
            finished = finished_event_data(data, [], error=message)
            await self._send(input.event, GET_SLI_FINISHED, finished)
            return finished

        results = []
        for indicator in data.get_sli.indicators:
            results.append(await self._fetch(api_url, indicator, context, input))

        finished = finished_event_data(data, results)
        await self._send(input.event, GET_SLI_FINISHED, finished)
        return finished

    async def _query_context(
        self, data: GetSLITriggeredEventData
    ) -> tuple[str, QueryContext]:
        """Resolve endpoint and custom queries; raises on batch-fatal errors."""
        api_url = await workflow.execute_activity(
            resolve_prometheus_endpoint,
            ResolveEndpointInput(project=data.project),
            start_to_close_timeout=timedelta(seconds=30),
            retry_policy=NO_RETRY,
        )
        custom_queries = await workflow.execute_activity(
            fetch_custom_queries,
            FetchCustomQueriesInput(project=data.project, stage=data.stage, service=data.service),
            start_to_close_timeout=timedelta(seconds=30),
            retry_policy=NO_RETRY,
        )
        return api_url, QueryContext(
            project=data.project,
            stage=data.stage,
            service=data.service,
            filters=data.get_sli.custom_filters,
            custom_queries=custom_queries,
        )

    async def _fetch(
        self,
        api_url: str,
        indicator: str,
        context: QueryContext,
        input: GetSLIInput,
    ) -> SLIResult:
        try:
            return await workflow.execute_activity(
                fetch_sli_value,
                FetchSLIValueInput(
                    api_url=api_url,
                    indicator=indicator,
                    context=context,
                    start=input.data.get_sli.start,
                    end=input.data.get_sli.end,
                ),
                start_to_close_timeout=timedelta(seconds=input.fetch_timeout_sec),
                retry_policy=NO_RETRY,
            )
        except ActivityError as e:
            return SLIResult.from_error(indicator, failure_message(e))

    async def _send(self, trigger: CloudEvent, event_type: str, data: EventData) -> None:
        await workflow.execute_activity(
            send_event,
            SendEventInput(
                trigger=trigger,
                event_type=event_type,
                data=data.model_dump(mode="json", by_alias=True),
            ),
            start_to_close_timeout=timedelta(seconds=30),
            retry_policy=EVENT_RETRY,
        )
