# src/kubesnap/core/config.py

import os

from dotenv import load_dotenv

from kubesnap.core.exceptions import ConfigurationError

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """
    Handles the application's configuration by loading values from environment variables.

    Every value is resolved at access time, so changes to the environment
    after import are picked up.
    """

    # --- Logging variables ---
    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()

    # --- Kubernetes connection ---
    # Unset values let kubernetes_asyncio fall back to ~/.kube/config and
    # the current context.
    @property
    def KUBECONFIG(self):
        return os.getenv("KUBECONFIG") or None

    @property
    def KUBE_CONTEXT(self):
        return os.getenv("KUBE_CONTEXT") or None

    # --- Resource metrics API ---
    @property
    def METRICS_API_GROUP(self) -> str:
        return os.getenv("METRICS_API_GROUP", "metrics.k8s.io")

    @property
    def METRICS_API_VERSION(self) -> str:
        return os.getenv("METRICS_API_VERSION", "v1beta1")

    @property
    def REQUEST_TIMEOUT(self) -> float:
        raw = os.getenv("KUBESNAP_REQUEST_TIMEOUT", "30")
        try:
            return float(raw)
        except ValueError as e:
            raise ConfigurationError(f"KUBESNAP_REQUEST_TIMEOUT must be a number, got '{raw}'.") from e

    def validate_instance(self):
        if self.LOG_LEVEL not in LOG_LEVELS:
            raise ConfigurationError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR or CRITICAL.")
        if not self.METRICS_API_GROUP or not self.METRICS_API_VERSION:
            raise ConfigurationError("METRICS_API_GROUP and METRICS_API_VERSION must not be empty.")
        if self.REQUEST_TIMEOUT <= 0:
            raise ConfigurationError("KUBESNAP_REQUEST_TIMEOUT must be greater than zero.")


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
