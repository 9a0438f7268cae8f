# tests/conftest.py

import pytest

from kubesnap.core import k8s_client


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Keeps the config module predictable and isolated from the developer's
    environment.
    """
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("KUBESNAP_REQUEST_TIMEOUT", "30")
    monkeypatch.delenv("KUBE_CONTEXT", raising=False)
    monkeypatch.delenv("KUBECONFIG", raising=False)
    monkeypatch.delenv("METRICS_API_GROUP", raising=False)
    monkeypatch.delenv("METRICS_API_VERSION", raising=False)


@pytest.fixture(autouse=True)
def reset_k8s_config_state(monkeypatch):
    """Every test starts with Kubernetes configuration not yet loaded."""
    monkeypatch.setattr(k8s_client, "_CONFIG_LOADED", False)


@pytest.fixture
def pod_metrics_item():
    """A single PodMetrics item as returned by metrics.k8s.io/v1beta1."""
    return {
        "metadata": {
            "name": "web-1",
            "namespace": "default",
            "creationTimestamp": "2024-05-01T12:00:05Z",
        },
        "timestamp": "2024-05-01T12:00:00Z",
        "window": "1m0s",
        "containers": [
            {"name": "app", "usage": {"cpu": "500m", "memory": "256Mi"}},
        ],
    }
