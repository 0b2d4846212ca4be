from .base_client import BaseBackendClient
from .prometheus_client import PrometheusClient

__all__ = ["BaseBackendClient", "PrometheusClient"]
