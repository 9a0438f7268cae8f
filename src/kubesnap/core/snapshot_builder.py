# src/kubesnap/core/snapshot_builder.py
"""
Turns raw pod metrics records into per-container usage snapshots with
canonical units: CPU in millicores, memory in bytes.
"""

from typing import Dict, List, Mapping, Optional

from kubesnap.models.metrics import (
    ContainerID,
    ContainerMetricsSnapshot,
    ContainerUsage,
    MetricName,
    PodID,
    PodMetricsRecord,
)
from kubesnap.utils.k8s_utils import QuantityLike, to_bytes, to_millicores

_CONVERTERS = {
    MetricName.CPU: to_millicores,
    MetricName.MEMORY: to_bytes,
}


def calculate_usage(raw_usage: Mapping[str, Optional[QuantityLike]]) -> Dict[MetricName, int]:
    """
    Converts a raw resource list to canonical amounts.

    Missing resources count as zero. Keys other than the tracked metric
    names are ignored.
    """
    return {name: convert(raw_usage.get(name.value)) for name, convert in _CONVERTERS.items()}


def create_container_metrics_snapshot(
    container: ContainerUsage, pod: PodMetricsRecord
) -> ContainerMetricsSnapshot:
    return ContainerMetricsSnapshot(
        id=ContainerID(
            pod_id=PodID(namespace=pod.namespace, pod_name=pod.name),
            container_name=container.name,
        ),
        usage=calculate_usage(container.usage),
        snapshot_time=pod.timestamp,
        snapshot_window=pod.window,
    )


def create_container_metrics_snapshots(pod: PodMetricsRecord) -> List[ContainerMetricsSnapshot]:
    """Builds one snapshot per container of the pod, in reporting order."""
    return [create_container_metrics_snapshot(container, pod) for container in pod.containers]
