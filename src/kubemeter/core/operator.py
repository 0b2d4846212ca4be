# src/kubemeter/core/operator.py
"""
MeteringOperator ties the compiler, the time-window normalizer and the
result aggregator to a backend client.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from ..collectors.base_client import BaseBackendClient
from ..expressions.compiler import MeterExpressionCompiler
from ..expressions.namespace import NamespaceScoper, get_namespace_scoper
from ..models.monitoring import MeterOptions, Metric, Metrics, QueryOptions
from .aggregator import collect_metrics, update_metric_stat_data
from .config import Config, config
from .exceptions import BackendError, ExpressionError, UnsupportedBackendError
from .normalizer import ONE_HOUR, generate_scaling_factor_map, normalize_time_window

logger = logging.getLogger(__name__)


class MeteringOperator:
    """
    Runs batches of meters and ad-hoc expressions against one backend.
    """

    def __init__(
        self,
        client: BaseBackendClient,
        compiler: Optional[MeterExpressionCompiler] = None,
        scoper: Optional[NamespaceScoper] = None,
        settings: Config = config,
    ):
        self.client = client
        self.compiler = compiler or MeterExpressionCompiler()
        self.settings = settings
        self._scoper_error: Optional[UnsupportedBackendError] = None

        if scoper is not None:
            self.scoper = scoper
        else:
            try:
                self.scoper = get_namespace_scoper(settings.MONITORING_BACKEND)
            except UnsupportedBackendError as e:
                logger.error("Namespace isolation is unavailable: %s", e)
                self.scoper = None
                self._scoper_error = e

    # --- meters ---

    def get_named_meters_over_time(
        self,
        meters: List[str],
        start: datetime,
        end: datetime,
        step: timedelta,
        options: QueryOptions,
    ) -> Metrics:
        """
        Evaluates meters over (start, end] and scales usage meters by the
        number of hours per step.

        Raises:
            StepTooSmallForRangeError: If the range is too long for the step.
            StepNotIntegerHoursError: If the step is not whole hours.
        """
        window = normalize_time_window(start, end, step)
        opts = options.model_copy(
            update={"meter_options": MeterOptions(start=window.start, end=window.end, step=window.step)}
        )

        def _evaluate(meter: str) -> Metric:
            expr = self.compiler.compile_strict(meter, opts)
            data = self.client.evaluate_range(expr, window.start, window.end, window.step)
            return Metric(metric_name=meter, metric_data=data)

        results = collect_metrics(meters, _evaluate)
        scaling_map = generate_scaling_factor_map(window.step)
        for metric in results:
            metric.metric_data = update_metric_stat_data(metric, scaling_map)
        return Metrics(results=results)

    def get_named_meters(self, meters: List[str], time: datetime, options: QueryOptions) -> Metrics:
        """Evaluates meters for the hour ending at `time`. No scaling is applied."""
        opts = options.model_copy(update={"meter_options": MeterOptions(step=ONE_HOUR)})

        def _evaluate(meter: str) -> Metric:
            expr = self.compiler.compile_strict(meter, opts)
            data = self.client.evaluate_instant(expr, time)
            return Metric(metric_name=meter, metric_data=data)

        results = collect_metrics(meters, _evaluate)
        for metric in results:
            metric.metric_data = update_metric_stat_data(metric)
        return Metrics(results=results)

    # --- ad-hoc expressions ---

    def _scope(self, expr: str, namespace: str) -> str:
        if self.scoper is None:
            raise self._scoper_error or UnsupportedBackendError(self.settings.MONITORING_BACKEND)
        return self.scoper.scope(expr, namespace)

    def get_metric(self, expr: str, namespace: str, time: datetime) -> Metric:
        try:
            scoped = self._scope(expr, namespace)
            return Metric(metric_name=expr, metric_data=self.client.evaluate_instant(scoped, time))
        except (UnsupportedBackendError, ExpressionError, BackendError) as e:
            logger.error("Failed to evaluate expression '%s': %s", expr, e)
            return Metric(metric_name=expr, error=str(e))

    def get_metric_over_time(
        self, expr: str, namespace: str, start: datetime, end: datetime, step: timedelta
    ) -> Metric:
        try:
            scoped = self._scope(expr, namespace)
            return Metric(metric_name=expr, metric_data=self.client.evaluate_range(scoped, start, end, step))
        except (UnsupportedBackendError, ExpressionError, BackendError) as e:
            logger.error("Failed to evaluate expression '%s' over time: %s", expr, e)
            return Metric(metric_name=expr, error=str(e))

    def get_metric_label_set(self, expr: str, namespace: str, start: datetime, end: datetime) -> List[Dict[str, str]]:
        """Label sets of the series selected by a namespace-scoped expression. Empty on error."""
        try:
            scoped = self._scope(expr, namespace)
            return self.client.series(scoped, start, end)
        except (UnsupportedBackendError, ExpressionError, BackendError) as e:
            logger.error("Failed to list label sets for '%s': %s", expr, e)
            return []
