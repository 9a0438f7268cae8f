# src/kubesnap/collectors/metrics_source.py
"""
Sources of pod-level usage records. ``PodMetricsSource`` is the single
capability the snapshot collector depends on; ``MetricsServerSource``
implements it against the Kubernetes resource metrics API.
"""

import logging
from typing import List, Optional

from kubernetes_asyncio import client
from typing_extensions import Protocol, runtime_checkable

from kubesnap.core.config import config as global_config
from kubesnap.core.exceptions import SourceUnavailableError
from kubesnap.core.k8s_client import get_custom_objects_api
from kubesnap.models.metrics import PodMetricsRecord

logger = logging.getLogger(__name__)

PLURAL = "pods"


@runtime_checkable
class PodMetricsSource(Protocol):
    async def list_pod_metrics(self) -> List[PodMetricsRecord]:
        """Lists pod metrics records across all namespaces."""
        ...


class MetricsServerSource:
    """
    Lists PodMetrics for all namespaces from ``metrics.k8s.io`` through the
    CustomObjectsApi. The API client is created lazily unless one is injected.
    """

    def __init__(
        self,
        api: Optional[client.CustomObjectsApi] = None,
        group: Optional[str] = None,
        version: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ):
        self._api = api
        self._owns_api = api is None
        self.group = group or global_config.METRICS_API_GROUP
        self.version = version or global_config.METRICS_API_VERSION
        self.request_timeout = request_timeout or global_config.REQUEST_TIMEOUT

    async def _ensure_client(self) -> Optional[client.CustomObjectsApi]:
        """Lazily initialize the Kubernetes client."""
        if self._api:
            return self._api

        self._api = await get_custom_objects_api()
        if not self._api:
            logger.warning("MetricsServerSource could not initialize Kubernetes client.")
        return self._api

    async def list_pod_metrics(self) -> List[PodMetricsRecord]:
        """
        Issues a single list call for pod metrics in all namespaces.

        Raises:
            SourceUnavailableError: If no Kubernetes configuration is available
                or the response is not a PodMetricsList.
            kubernetes_asyncio.client.ApiException: If the API call fails.
            pydantic.ValidationError: If an item has an unexpected shape.
        """
        api = await self._ensure_client()
        if not api:
            raise SourceUnavailableError("Kubernetes client not configured; cannot list pod metrics.")

        response = await api.list_cluster_custom_object(
            self.group, self.version, PLURAL, _request_timeout=self.request_timeout
        )
        items = response.get("items") if isinstance(response, dict) else None
        if not isinstance(items, list):
            raise SourceUnavailableError(
                f"Malformed response from {self.group}/{self.version}: expected a PodMetricsList with 'items'."
            )

        return [PodMetricsRecord.from_api_item(item) for item in items]

    async def close(self):
        """Close the Kubernetes API client if this source created it."""
        if self._api and self._owns_api:
            await self._api.api_client.close()
            logger.debug("MetricsServerSource Kubernetes client closed.")
            self._api = None
