"""Temporal activities for the SLI service.

Activities perform I/O operations:
- Credentials: Resolve the project's Prometheus endpoint
- Configuration: Fetch custom SLI queries
- Prometheus: Fetch one SLI value
- Events: Emit started/finished events to the event broker
"""

from .configuration import fetch_custom_queries
from .credentials import resolve_prometheus_endpoint
from .events import send_event
from .prometheus import fetch_sli_value

__all__ = [
    # Credentials
    "resolve_prometheus_endpoint",
    # Configuration
    "fetch_custom_queries",
    # Prometheus
    "fetch_sli_value",
    # Events
    "send_event",
]
