"""Process configuration for the SLI service.

Variable names match the deployment manifests of the service, so most
fields read an unprefixed environment variable through an alias.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROMETHEUS_URL = "http://prometheus-service.monitoring.svc.cluster.local:8080"
SLI_RESOURCE_URI = "prometheus/sli.yaml"


class SLIServiceSettings(BaseSettings):
    """Main configuration for the SLI service."""

    model_config = SettingsConfigDict(populate_by_name=True)

    # Keptn collaborators
    configuration_service: str = Field(
        default="http://configuration-service:8080",
        validation_alias="CONFIGURATION_SERVICE",
        description="Configuration service holding per-project SLI queries",
    )
    event_broker: str = Field(
        default="http://event-broker/keptn",
        validation_alias="EVENTBROKER",
        description="Event broker receiving started/finished events",
    )
    pod_namespace: str = Field(
        default="keptn",
        validation_alias="POD_NAMESPACE",
        description="Namespace holding prometheus-credentials-<project> secrets",
    )

    # Temporal
    temporal_address: str = Field(default="localhost:7233", validation_alias="TEMPORAL_ADDRESS")
    temporal_namespace: str = Field(default="default", validation_alias="TEMPORAL_NAMESPACE")
    task_queue: str = Field(default="sli-task-queue", validation_alias="SLI_TASK_QUEUE")

    # Metrics backend
    default_prometheus_url: str = Field(
        default=DEFAULT_PROMETHEUS_URL,
        validation_alias="SLI_DEFAULT_PROMETHEUS_URL",
        description="Used when a project has no credentials secret",
    )
    query_timeout_sec: float = Field(
        default=30.0,
        gt=0,
        validation_alias="SLI_QUERY_TIMEOUT_SEC",
        description="Per-query HTTP timeout against the metrics backend",
    )
    verify_tls: bool = Field(
        default=True,
        validation_alias="SLI_VERIFY_TLS",
        description="Verify TLS certificates of the metrics backend",
    )

    # Event receiver
    receiver_port: int = Field(default=8080, validation_alias="RCV_PORT")
    receiver_path: str = Field(default="/", validation_alias="RCV_PATH")


@lru_cache
def get_settings() -> SLIServiceSettings:
    """Settings shared by activities within one worker process."""
    return SLIServiceSettings()
