"""Prometheus endpoint resolution from per-project credential secrets.

A project may point at an external Prometheus through the Kubernetes secret
``prometheus-credentials-<project>``; its ``prometheus-credentials`` key
holds YAML:

    url: https://prometheus.example.com
    user: reader
    password: secret

Without that secret the in-cluster default endpoint is used. The secret is
read through the Kubernetes API with the pod's service-account token.
"""

import base64
import binascii
import logging
import os
import ssl
from pathlib import Path

import httpx
import yaml
from pydantic import ValidationError
from temporalio import activity

from sli_service.errors import CredentialsError, SLIError
from sli_service.models import PrometheusCredentials, ResolveEndpointInput, get_settings
from sli_service.prometheus import generate_prometheus_url

from .common import to_application_error

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")
SECRET_PREFIX = "prometheus-credentials-"
SECRET_KEY = "prometheus-credentials"


def secret_name(project: str) -> str:
    return f"{SECRET_PREFIX}{project}"


def parse_credentials(encoded: str, project: str) -> PrometheusCredentials:
    """Decode the base64 YAML stored under the secret's credentials key."""
    try:
        content = yaml.safe_load(base64.b64decode(encoded, validate=True))
        return PrometheusCredentials.model_validate(content)
    except (binascii.Error, yaml.YAMLError, ValidationError) as e:
        raise CredentialsError(
            f"invalid credentials format found in secret '{secret_name(project)}': {e}"
        ) from e


async def read_credentials(
    client: httpx.AsyncClient,
    namespace: str,
    project: str,
) -> PrometheusCredentials | None:
    """Fetch the project's credentials secret; ``None`` when it doesn't exist."""
    path = f"/api/v1/namespaces/{namespace}/secrets/{secret_name(project)}"
    try:
        response = await client.get(path)
    except httpx.TransportError as e:
        raise CredentialsError(f"could not reach the Kubernetes API: {e}") from e

    if response.status_code == 404:
        return None
    if response.status_code != 200:
        raise CredentialsError(
            f"could not read secret '{secret_name(project)}': HTTP {response.status_code}"
        )

    try:
        secret = response.json()
    except ValueError as e:
        raise CredentialsError(f"could not decode secret '{secret_name(project)}': {e}") from e
    data = (secret.get("data") if isinstance(secret, dict) else None) or {}
    if SECRET_KEY not in data:
        raise CredentialsError(f"secret '{secret_name(project)}' has no '{SECRET_KEY}' key")
    return parse_credentials(data[SECRET_KEY], project)


async def resolve_endpoint(
    client: httpx.AsyncClient,
    namespace: str,
    project: str,
    default_url: str,
) -> str:
    credentials = await read_credentials(client, namespace, project)
    if credentials is None:
        logger.info(
            "No external prometheus instance defined for project %s. Using default: %s",
            project,
            default_url,
        )
        return default_url
    return generate_prometheus_url(credentials)


def in_cluster_client(timeout: float = 10.0) -> httpx.AsyncClient:
    """HTTP client for the Kubernetes API using the pod's service account."""
    host = os.environ.get("KUBERNETES_SERVICE_HOST")
    port = os.environ.get("KUBERNETES_SERVICE_PORT", "443")
    if not host:
        raise CredentialsError("could not create Kubernetes client: not running in a cluster")

    try:
        token = (SERVICE_ACCOUNT_DIR / "token").read_text().strip()
        tls = ssl.create_default_context(cafile=str(SERVICE_ACCOUNT_DIR / "ca.crt"))
    except OSError as e:
        raise CredentialsError(f"could not create Kubernetes client: {e}") from e

    return httpx.AsyncClient(
        base_url=f"https://{host}:{port}",
        headers={"Authorization": f"Bearer {token}"},
        verify=tls,
        timeout=timeout,
    )


@activity.defn
async def resolve_prometheus_endpoint(input: ResolveEndpointInput) -> str:
    """Resolve the Prometheus API URL for a project.

    Args:
        input: ResolveEndpointInput with the project name

    Returns:
        Base URL of the Prometheus API, credentials embedded as userinfo
    """
    settings = get_settings()
    activity.logger.info(
        f"Checking if external prometheus instance has been defined for project {input.project}"
    )
    try:
        async with in_cluster_client() as client:
            return await resolve_endpoint(
                client, settings.pod_namespace, input.project, settings.default_prometheus_url
            )
    except SLIError as e:
        activity.logger.error(f"Could not resolve Prometheus endpoint: {e}")
        raise to_application_error(e) from e
