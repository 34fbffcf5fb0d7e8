"""Translation of service errors into Temporal failures."""

from temporalio.exceptions import ApplicationError

from sli_service.errors import SLIError  # noqa: TC001


def to_application_error(error: SLIError) -> ApplicationError:
    """Non-retryable failure typed after the originating exception class.

    SLI fetches are never retried; the workflow records the message on the
    indicator (or the whole batch) instead.
    """
    return ApplicationError(str(error), type=type(error).__name__, non_retryable=True)
