# src/kubemeter/reporters/base_reporter.py
"""
Defines the abstract base class for all reporters.
"""
from abc import ABC, abstractmethod

from ..models.monitoring import Metrics


class BaseReporter(ABC):
    """
    Abstract Base Class for all reporters.
    """

    @abstractmethod
    def report(self, metrics: Metrics):
        """
        Takes the evaluated meters and presents them in a specific format.
        """
        pass
