import asyncio
import logging
import typing

from kubernetes_asyncio import client, config

from kubesnap.core.config import config as global_config

logger = logging.getLogger(__name__)

# Config loading happens once per process
_CONFIG_LOCK = asyncio.Lock()
_CONFIG_LOADED = False


async def ensure_k8s_config() -> bool:
    """
    Ensures that the Kubernetes configuration is loaded exactly once.

    In-cluster configuration is tried first, then the kubeconfig file
    (``KUBECONFIG`` / ``KUBE_CONTEXT`` when set).

    Returns:
        bool: True if config was loaded successfully (or was already loaded), False otherwise.
    """
    global _CONFIG_LOADED

    if _CONFIG_LOADED:
        return True

    async with _CONFIG_LOCK:
        if _CONFIG_LOADED:
            return True

        try:
            logger.debug("Attempting to load in-cluster Kubernetes config...")
            config.load_incluster_config()
            logger.info("Loaded in-cluster Kubernetes configuration.")
            _CONFIG_LOADED = True
            return True
        except config.ConfigException:
            logger.debug("In-cluster config not found.")
        except Exception as e:
            logger.warning("Unexpected error loading in-cluster config: %s", e)

        try:
            logger.debug("Attempting to load local kubeconfig...")
            await config.load_kube_config(
                config_file=global_config.KUBECONFIG,
                context=global_config.KUBE_CONTEXT,
            )
            logger.info("Loaded Kubernetes configuration from kubeconfig file.")
            _CONFIG_LOADED = True
            return True
        except config.ConfigException:
            logger.warning("Could not find kubeconfig file.")
        except Exception as e:
            logger.warning("Unexpected error loading kubeconfig: %s", e)

    logger.warning("Failed to load any Kubernetes configuration.")
    return False


async def get_custom_objects_api() -> typing.Optional[client.CustomObjectsApi]:
    """
    Returns a configured CustomObjectsApi instance, used to query the
    resource metrics API. Safe to call concurrently.
    """
    if await ensure_k8s_config():
        return client.CustomObjectsApi()
    return None
