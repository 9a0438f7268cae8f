# tests/collectors/test_container_metrics_collector.py

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from kubernetes_asyncio.client.rest import ApiException

from kubesnap.collectors.container_metrics_collector import ContainerMetricsCollector
from kubesnap.collectors.metrics_source import MetricsServerSource
from kubesnap.core.exceptions import SourceUnavailableError
from kubesnap.models.metrics import ContainerID, ContainerUsage, MetricName, PodID, PodMetricsRecord

T = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeSource:
    """Canned pod metrics, or an induced failure."""

    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error
        self.calls = 0

    async def list_pod_metrics(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.records


def _record(namespace, name, *containers):
    return PodMetricsRecord(
        namespace=namespace,
        name=name,
        timestamp=T,
        window=timedelta(seconds=30),
        containers=[ContainerUsage(name=c, usage={"cpu": "100m", "memory": "1Mi"}) for c in containers],
    )


@pytest.mark.asyncio
async def test_collect_flattens_all_pods():
    source = FakeSource(
        records=[
            _record("prod", "api-0", "app", "sidecar"),
            _record("dev", "worker-0"),
            _record("dev", "worker-1", "worker"),
        ]
    )

    snapshots = await ContainerMetricsCollector(source).collect()

    assert source.calls == 1
    assert [(s.id.pod_id.namespace, s.id.pod_id.pod_name, s.id.container_name) for s in snapshots] == [
        ("prod", "api-0", "app"),
        ("prod", "api-0", "sidecar"),
        ("dev", "worker-1", "worker"),
    ]


@pytest.mark.asyncio
async def test_zero_pods_is_an_empty_result():
    assert await ContainerMetricsCollector(FakeSource()).collect() == []


@pytest.mark.asyncio
async def test_listing_failure_is_wrapped_with_cause():
    cause = ApiException(status=503, reason="Service Unavailable")
    collector = ContainerMetricsCollector(FakeSource(error=cause))

    with pytest.raises(SourceUnavailableError) as exc_info:
        await collector.collect()

    assert exc_info.value.cause is cause
    assert exc_info.value.__cause__ is cause


@pytest.mark.asyncio
async def test_connection_failure_is_wrapped():
    cause = ConnectionRefusedError("metrics-server unreachable")
    with pytest.raises(SourceUnavailableError) as exc_info:
        await ContainerMetricsCollector(FakeSource(error=cause)).collect()
    assert isinstance(exc_info.value.cause, ConnectionRefusedError)


@pytest.mark.asyncio
async def test_source_unavailable_from_source_propagates_unchanged():
    error = SourceUnavailableError("Kubernetes client not configured")
    with pytest.raises(SourceUnavailableError) as exc_info:
        await ContainerMetricsCollector(FakeSource(error=error)).collect()
    assert exc_info.value is error


@pytest.mark.asyncio
async def test_unparseable_quantity_fails_the_whole_fetch():
    good = _record("prod", "api-0", "app")
    bad = PodMetricsRecord(
        namespace="prod",
        name="api-1",
        timestamp=T,
        window=timedelta(seconds=30),
        containers=[ContainerUsage(name="app", usage={"cpu": "a lot"})],
    )

    with pytest.raises(SourceUnavailableError) as exc_info:
        await ContainerMetricsCollector(FakeSource(records=[good, bad])).collect()
    assert isinstance(exc_info.value.cause, ValueError)


@pytest.mark.asyncio
async def test_each_collect_returns_fresh_snapshots():
    collector = ContainerMetricsCollector(FakeSource(records=[_record("prod", "api-0", "app")]))

    first = await collector.collect()
    second = await collector.collect()

    assert first == second
    assert first is not second
    assert first[0] is not second[0]


@pytest.mark.asyncio
async def test_end_to_end_with_metrics_server(pod_metrics_item):
    pod_metrics_item["window"] = "60s"
    mock_api = MagicMock()
    mock_api.list_cluster_custom_object = AsyncMock(return_value={"items": [pod_metrics_item]})

    snapshots = await ContainerMetricsCollector(MetricsServerSource(api=mock_api)).collect()

    assert len(snapshots) == 1
    snapshot = snapshots[0]
    assert snapshot.id == ContainerID(pod_id=PodID(namespace="default", pod_name="web-1"), container_name="app")
    assert snapshot.usage == {MetricName.CPU: 500, MetricName.MEMORY: 268435456}
    assert snapshot.snapshot_time == T
    assert snapshot.snapshot_window == timedelta(seconds=60)


@pytest.mark.asyncio
async def test_end_to_end_api_error(pod_metrics_item):
    mock_api = MagicMock()
    mock_api.list_cluster_custom_object = AsyncMock(side_effect=ApiException(status=403, reason="Forbidden"))

    with pytest.raises(SourceUnavailableError) as exc_info:
        await ContainerMetricsCollector(MetricsServerSource(api=mock_api)).collect()

    assert exc_info.value.cause.status == 403


@pytest.mark.asyncio
async def test_close_delegates_to_source():
    source = FakeSource()
    source.close = AsyncMock()
    await ContainerMetricsCollector(source).close()
    source.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_without_source_close():
    await ContainerMetricsCollector(FakeSource()).close()


@pytest.mark.asyncio
@pytest.mark.parametrize("usage", [{"cpu": "-1", "memory": "1Mi"}, {"cpu": "100m", "memory": "-1Ki"}])
async def test_negative_quantity_fails_the_whole_fetch(usage):
    good = _record("prod", "api-0", "app")
    negative = PodMetricsRecord(
        namespace="prod",
        name="api-1",
        timestamp=T,
        window=timedelta(seconds=30),
        containers=[ContainerUsage(name="app", usage=usage)],
    )

    with pytest.raises(SourceUnavailableError) as exc_info:
        await ContainerMetricsCollector(FakeSource(records=[good, negative])).collect()

    assert isinstance(exc_info.value.cause, ValueError)
