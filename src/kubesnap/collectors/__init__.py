from .container_metrics_collector import ContainerMetricsCollector
from .metrics_source import MetricsServerSource, PodMetricsSource

__all__ = [
    "ContainerMetricsCollector",
    "MetricsServerSource",
    "PodMetricsSource",
]
