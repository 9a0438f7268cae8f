# src/kubesnap/models/metrics.py
"""
Pydantic data models for container usage snapshots and the raw pod metrics
records they are built from. Every model is frozen: snapshots are value
objects handed over to the caller and never mutated afterwards.
"""

from datetime import datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from typing_extensions import Annotated

from kubesnap.utils.date_utils import ensure_utc
from kubesnap.utils.k8s_utils import parse_duration

# CPU in millicores, memory in bytes.
ResourceAmount = Annotated[int, Field(ge=0)]


class MetricName(str, Enum):
    """Resource kinds tracked in a snapshot. Values are Kubernetes resource names."""

    CPU = "cpu"
    MEMORY = "memory"


class PodID(BaseModel):
    """Identifies a pod uniquely within a cluster."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., description="The namespace the pod belongs to.")
    pod_name: str = Field(..., description="The name of the Kubernetes pod.")


class ContainerID(BaseModel):
    """Identifies a container uniquely within a pod."""

    model_config = ConfigDict(frozen=True)

    pod_id: PodID
    container_name: str = Field(..., description="The name of the container within the pod.")


class ContainerMetricsSnapshot(BaseModel):
    """
    Resource usage of a single container at a point in time, in canonical
    units (CPU in millicores, memory in bytes).
    """

    model_config = ConfigDict(frozen=True)

    id: ContainerID
    usage: Mapping[MetricName, ResourceAmount] = Field(..., description="Usage per tracked resource.")
    snapshot_time: datetime = Field(..., description="When the usage was sampled (UTC).")
    snapshot_window: timedelta = Field(
        ..., description="Duration over which usage was averaged; zero for an instantaneous sample."
    )

    @field_validator("usage")
    @classmethod
    def _freeze_usage(cls, value: Mapping[MetricName, int]) -> Mapping[MetricName, int]:
        return MappingProxyType(dict(value))

    @field_validator("snapshot_time")
    @classmethod
    def _snapshot_time_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_validator("snapshot_window")
    @classmethod
    def _window_not_negative(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("snapshot_window must not be negative")
        return value

    @model_validator(mode="after")
    def _all_metrics_present(self) -> "ContainerMetricsSnapshot":
        missing = [name.value for name in MetricName if name not in self.usage]
        if missing:
            raise ValueError(f"usage is missing tracked metrics: {', '.join(missing)}")
        return self

    @field_serializer("usage")
    def _serialize_usage(self, value: Mapping[MetricName, int]) -> Dict[MetricName, int]:
        return dict(value)

    def __hash__(self) -> int:
        return hash((self.id, frozenset(self.usage.items()), self.snapshot_time, self.snapshot_window))


class ContainerUsage(BaseModel):
    """Raw usage of one container as reported by the metrics source."""

    model_config = ConfigDict(frozen=True)

    name: str
    usage: Dict[str, Union[str, int, float]] = Field(default_factory=dict)

    @field_validator("usage", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class PodMetricsRecord(BaseModel):
    """
    One pod entry of a PodMetricsList: pod-level timestamp and window shared
    by all of its containers.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str
    timestamp: datetime
    window: timedelta
    containers: List[ContainerUsage] = Field(default_factory=list)

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_validator("window", mode="before")
    @classmethod
    def _parse_window(cls, value: Any) -> Any:
        # The metrics API serializes windows as Go durations ("30s", "1m0s")
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_validator("containers", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_api_item(cls, item: Mapping[str, Any]) -> "PodMetricsRecord":
        """
        Build a record from a ``metrics.k8s.io`` PodMetrics item.

        Raises:
            pydantic.ValidationError: If the item does not have the expected shape.
        """
        metadata = item.get("metadata") or {}
        return cls.model_validate(
            {
                "namespace": metadata.get("namespace"),
                "name": metadata.get("name"),
                "timestamp": item.get("timestamp"),
                "window": item.get("window"),
                "containers": item.get("containers"),
            }
        )
