# src/kubemeter/collectors/base_client.py
"""
This module defines the abstract base class for metrics backend clients.
The operator only depends on this interface, so any backend able to
evaluate compiled expressions can be plugged in.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, List

from ..models.monitoring import MetricData


class BaseBackendClient(ABC):
    """
    Abstract Base Class for time-series backend clients.
    """

    @abstractmethod
    def evaluate_instant(self, expr: str, time: datetime) -> MetricData:
        """
        Evaluates an expression at a single point in time.

        Raises:
            BackendError: If the backend cannot evaluate the expression.
        """
        pass

    @abstractmethod
    def evaluate_range(self, expr: str, start: datetime, end: datetime, step: timedelta) -> MetricData:
        """
        Evaluates an expression over [start, end] at the given resolution.

        Raises:
            BackendError: If the backend cannot evaluate the expression.
        """
        pass

    @abstractmethod
    def series(self, match: str, start: datetime, end: datetime) -> List[Dict[str, str]]:
        """
        Returns the label sets of the series selected by `match`.

        Raises:
            BackendError: If the backend cannot answer the request.
        """
        pass

    def close(self):
        """
        Clean up resources (e.g., close HTTP sessions or API clients).
        """
        pass
