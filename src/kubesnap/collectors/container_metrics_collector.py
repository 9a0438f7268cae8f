# src/kubesnap/collectors/container_metrics_collector.py
"""
Collects usage snapshots for every running container in the cluster.
"""

import logging
from typing import List, Optional

from kubesnap.collectors.base_collector import BaseCollector
from kubesnap.collectors.metrics_source import MetricsServerSource, PodMetricsSource
from kubesnap.core.exceptions import SourceUnavailableError
from kubesnap.core.snapshot_builder import create_container_metrics_snapshots
from kubesnap.models.metrics import ContainerMetricsSnapshot

logger = logging.getLogger(__name__)


class ContainerMetricsCollector(BaseCollector):
    """
    Lists pod metrics once for all namespaces and fans every pod out into
    one snapshot per container.

    The fetch is all-or-nothing: any failure of the source, including a
    response that cannot be converted, raises ``SourceUnavailableError``
    and no snapshots are returned. Nothing is retried or cached.
    """

    def __init__(self, source: Optional[PodMetricsSource] = None):
        self.source = source if source is not None else MetricsServerSource()

    async def collect(self) -> List[ContainerMetricsSnapshot]:
        """
        Returns the current snapshots of all containers. Order follows the
        source listing and carries no meaning.

        Raises:
            SourceUnavailableError: If the listing fails; ``cause`` holds the
                underlying exception.
        """
        try:
            pod_metrics_list = await self.source.list_pod_metrics()
            logger.debug("%d podMetrics retrieved for all namespaces", len(pod_metrics_list))

            snapshots: List[ContainerMetricsSnapshot] = []
            for pod_metrics in pod_metrics_list:
                snapshots.extend(create_container_metrics_snapshots(pod_metrics))
        except SourceUnavailableError:
            raise
        except Exception as e:
            raise SourceUnavailableError(f"Failed to list pod metrics: {e}", cause=e) from e

        logger.debug("Built %d container metrics snapshots.", len(snapshots))
        return snapshots

    async def close(self):
        """Close the underlying source if it holds resources."""
        close = getattr(self.source, "close", None)
        if close is not None:
            await close()
