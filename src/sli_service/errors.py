"""Exceptions raised while retrieving SLI values.

Per-indicator errors (everything under ``IndicatorError``) fail a single
indicator and never abort the batch. ``ConfigurationError`` and
``CredentialsError`` are raised before any indicator is attempted and fail
the whole ``get-sli`` request.
"""


class SLIError(Exception):
    """Base class for all errors raised by the SLI service."""


class IndicatorError(SLIError):
    """An error local to one indicator."""


class UnsupportedIndicatorError(IndicatorError):
    def __init__(self, indicator: str) -> None:
        self.indicator = indicator
        super().__init__(f"unsupported SLI: {indicator}")


class TimeParseError(IndicatorError):
    def __init__(self, timestamp: str) -> None:
        self.timestamp = timestamp
        super().__init__(
            f"could not parse timestamp '{timestamp}': expected RFC3339 or Unix seconds"
        )


class TransportError(IndicatorError):
    """The metrics backend could not be reached."""


class NonSuccessStatusError(IndicatorError):
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"metric could not be received (HTTP {status_code})")


class MalformedResponseError(IndicatorError):
    """The backend answered 200 but the body is not a query response."""


class ConfigurationError(SLIError):
    """Custom SLI queries could not be loaded."""


class CredentialsError(SLIError):
    """The Prometheus endpoint for a project could not be resolved."""
