# src/kubemeter/core/aggregator.py
"""
Collects per-meter outcomes into an ordered result list and turns raw
backend samples into usage values.

Each meter is evaluated independently: a failure is recorded in that meter's
entry and the batch continues.
"""

import logging
from typing import Callable, Iterable, List, Mapping, Optional

from ..data.meter_resources import get_resource_unit
from ..models.monitoring import Metric, MetricData, MetricValue, MetricType, Point
from .exceptions import BackendError, UnknownMetricError

logger = logging.getLogger(__name__)


def collect_metrics(names: Iterable[str], evaluate: Callable[[str], Metric]) -> List[Metric]:
    """
    Evaluates every metric name in order. Unknown metrics and backend
    failures become Metric(error=...) entries; result order matches names.
    """
    results = []
    for name in names:
        try:
            metric = evaluate(name)
        except (BackendError, UnknownMetricError) as e:
            logger.error("Failed to evaluate metric %s: %s", name, e)
            metric = Metric(metric_name=name, error=str(e))
        results.append(metric)
    return results


def _scale_point(point: Point, factor: float) -> Point:
    return Point(timestamp=point.timestamp, value=point.value * factor)


def update_metric_stat_data(metric: Metric, scaling_map: Optional[Mapping[str, float]] = None) -> MetricData:
    """
    Applies the scaling factor of the metric (1 when absent) to every sample
    and computes min/max/avg/sum plus the resource unit of each series.
    A metric carrying an error is returned untouched.
    """
    data = metric.metric_data
    if metric.error:
        return data

    factor = 1.0
    if scaling_map is not None:
        factor = scaling_map.get(metric.metric_name, 1.0)
    unit = get_resource_unit(metric.metric_name)

    values = []
    for value in data.metric_values:
        if data.metric_type == MetricType.MATRIX:
            series = [_scale_point(p, factor) for p in value.series]
            sample = None
            points = [p.value for p in series]
        else:
            series = []
            sample = _scale_point(value.sample, factor) if value.sample else None
            points = [sample.value] if sample else []

        values.append(
            MetricValue(
                metadata=value.metadata,
                sample=sample,
                series=series,
                min_value=min(points) if points else None,
                max_value=max(points) if points else None,
                avg_value=sum(points) / len(points) if points else None,
                sum_value=sum(points) if points else None,
                resource_unit=unit,
            )
        )

    return MetricData(metric_type=data.metric_type, metric_values=values)
