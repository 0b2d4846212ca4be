# src/kubemeter/collectors/prometheus_client.py

"""
PrometheusClient evaluates compiled expressions against the Prometheus HTTP
API and parses the payload into MetricData.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import Config, config
from ..core.exceptions import BackendError
from ..models.monitoring import MetricData, MetricType, MetricValue, Point
from ..utils.date_utils import to_iso_z
from .base_client import BaseBackendClient

logger = logging.getLogger(__name__)


class PrometheusClient(BaseBackendClient):
    """
    Thin synchronous client for /api/v1/query, /api/v1/query_range and
    /api/v1/series.
    """

    def __init__(self, settings: Config = config, client: Optional[httpx.Client] = None):
        """
        Initializes the client with settings. An httpx.Client may be injected
        for tests or connection sharing.
        """
        self.settings = settings
        self.base_url = settings.PROMETHEUS_URL
        self.timeout = getattr(settings, "PROMETHEUS_TIMEOUT", 10)

        # TLS verify and auth support
        self.verify = getattr(settings, "PROMETHEUS_VERIFY_CERTS", True)
        self.bearer_token = getattr(settings, "PROMETHEUS_BEARER_TOKEN", None)
        self.username = getattr(settings, "PROMETHEUS_USERNAME", None)
        self.password = getattr(settings, "PROMETHEUS_PASSWORD", None)

        headers = {}
        if self.bearer_token:
            headers["Authorization"] = f"Bearer {self.bearer_token}"

        auth = None
        if self.username and self.password:
            auth = (self.username, self.password)

        self._client = client or httpx.Client(
            timeout=self.timeout,
            verify=self.verify,
            headers=headers,
            auth=auth,
            follow_redirects=True,
        )

    def evaluate_instant(self, expr: str, time: datetime) -> MetricData:
        data = self._get("query", {"query": expr, "time": to_iso_z(time)})
        return self._parse_result(data)

    def evaluate_range(self, expr: str, start: datetime, end: datetime, step: timedelta) -> MetricData:
        params = {
            "query": expr,
            "start": to_iso_z(start),
            "end": to_iso_z(end),
            "step": f"{int(step.total_seconds())}s",
        }
        data = self._get("query_range", params)
        return self._parse_result(data)

    def series(self, match: str, start: datetime, end: datetime) -> List[Dict[str, str]]:
        params = {"match[]": match, "start": to_iso_z(start), "end": to_iso_z(end)}
        data = self._get("series", params)
        if not isinstance(data, list):
            raise BackendError("Prometheus series endpoint returned an unexpected payload")
        return data

    def close(self):
        self._client.close()

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        """
        Internal helper to call a Prometheus API endpoint.

        Returns the 'data' member of a successful response. A well-formed
        error payload is raised at once; transport failures move on to the
        next candidate path.
        """
        if not self.base_url:
            raise BackendError("PROMETHEUS_URL is not set")

        base = self.base_url.rstrip("/")
        candidates = [
            f"{base}/api/v1/{endpoint}",
            f"{base}/prometheus/api/v1/{endpoint}",
        ]

        last_err = None
        for url in candidates:
            try:
                logger.debug("Querying Prometheus at %s", url)
                response = self._client.get(url, params=params)
            except httpx.HTTPError as e:
                last_err = e
                logger.debug("Failed to connect to Prometheus at %s: %s", url, e)
                continue

            try:
                payload = response.json()
            except ValueError:
                last_err = f"HTTP {response.status_code} with a non-JSON body"
                logger.debug("Prometheus at %s answered %s", url, last_err)
                continue

            if not isinstance(payload, dict) or "status" not in payload:
                last_err = f"HTTP {response.status_code} with an unexpected body"
                continue

            if payload.get("status") != "success":
                error_type = payload.get("errorType", "error")
                message = payload.get("error", "Unknown")
                logger.warning("Prometheus returned non-success status for %s: %s", url, message)
                raise BackendError(f"{error_type}: {message}")

            return payload.get("data", {})

        logger.error("All Prometheus endpoints failed for %s. Last error: %s", endpoint, last_err)
        raise BackendError(f"Prometheus is unreachable: {last_err}")

    def _parse_result(self, data: Dict[str, Any]) -> MetricData:
        if not isinstance(data, dict):
            raise BackendError("Prometheus query endpoint returned an unexpected payload")
        result_type = data.get("resultType")
        result = data.get("result", [])

        if result_type == MetricType.SCALAR.value:
            point = self._parse_point(result)
            values = [MetricValue(sample=point)] if point else []
            return MetricData(metric_type=MetricType.SCALAR, metric_values=values)

        if result_type not in (MetricType.VECTOR.value, MetricType.MATRIX.value):
            raise BackendError(f"unsupported result type '{result_type}'")

        if not isinstance(result, list):
            raise BackendError(f"malformed {result_type} result from Prometheus")

        values = []
        skipped = 0
        for item in result:
            if not isinstance(item, dict):
                raise BackendError(f"malformed {result_type} entry from Prometheus: {item!r}")
            metadata = item.get("metric") or {}
            if not isinstance(metadata, dict):
                raise BackendError(f"malformed label set from Prometheus: {metadata!r}")
            if result_type == MetricType.MATRIX.value:
                series = [p for p in (self._parse_point(v) for v in item.get("values", [])) if p]
                if not series:
                    skipped += 1
                    continue
                values.append(MetricValue(metadata=metadata, series=series))
            else:
                sample = self._parse_point(item.get("value"))
                if sample is None:
                    skipped += 1
                    continue
                values.append(MetricValue(metadata=metadata, sample=sample))

        if skipped:
            logger.info("Skipped %d Prometheus series without a usable value.", skipped)

        return MetricData(metric_type=MetricType(result_type), metric_values=values)

    @staticmethod
    def _parse_point(raw: Any) -> Optional[Point]:
        """
        Parses a [<timestamp>, "<value>"] pair. NaN and malformed values
        yield None.
        """
        try:
            timestamp, value_str = raw
            value = float(value_str)
        except (TypeError, ValueError):
            return None
        if math.isnan(value):
            return None
        return Point(timestamp=int(float(timestamp)), value=value)
