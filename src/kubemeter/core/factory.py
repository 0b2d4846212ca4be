# src/kubemeter/core/factory.py
"""
Factory functions to instantiate the backend client and the MeteringOperator
selected by configuration.
"""

import logging
from functools import lru_cache

from ..collectors.base_client import BaseBackendClient
from ..collectors.prometheus_client import PrometheusClient
from .config import config
from .exceptions import UnsupportedBackendError
from .operator import MeteringOperator

logger = logging.getLogger(__name__)

BACKEND_CLIENTS = {
    "prometheus": PrometheusClient,
}


@lru_cache(maxsize=1)
def get_backend_client() -> BaseBackendClient:
    """
    Factory function to get the client for MONITORING_BACKEND.
    Uses lru_cache to act as a singleton.

    Raises:
        UnsupportedBackendError: If no client is registered for the backend.
    """
    backend = config.MONITORING_BACKEND
    client_cls = BACKEND_CLIENTS.get(backend)
    if client_cls is None:
        raise UnsupportedBackendError(backend)
    logger.info("Using %s backend at %s.", backend, config.PROMETHEUS_URL)
    return client_cls(config)


@lru_cache(maxsize=1)
def get_operator() -> MeteringOperator:
    """
    Factory function to instantiate a MeteringOperator over the configured backend.
    Uses lru_cache to act as a singleton.
    """
    return MeteringOperator(client=get_backend_client(), settings=config)
