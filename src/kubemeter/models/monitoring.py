# src/kubemeter/models/monitoring.py
"""
Pydantic models shared by the expression compiler, the backend client and
the result aggregator.

QueryOptions carries the scope of a metering request. String filters use the
empty string for "not set", which is also what an unresolved placeholder
renders to.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field


class Level(str, Enum):
    """The aggregation scope at which a metric is computed."""

    CLUSTER = "cluster"
    NODE = "node"
    WORKSPACE = "workspace"
    NAMESPACE = "namespace"
    APPLICATION = "application"
    WORKLOAD = "workload"
    SERVICE = "service"
    POD = "pod"


class MetricType(str, Enum):
    """Result type reported by the backend."""

    VECTOR = "vector"
    MATRIX = "matrix"
    SCALAR = "scalar"


class MeterOptions(BaseModel):
    """
    Time parameters of a metering query. The step is always rendered as a
    whole number of hours.
    """

    step: timedelta = Field(default=timedelta(hours=1), description="Sampling interval of the meter.")
    start: Optional[datetime] = Field(None, description="Exclusive start of a ranged query.")
    end: Optional[datetime] = Field(None, description="Inclusive end of a ranged query.")


class QueryOptions(BaseModel):
    """
    Scope filters of a request. Identity filters (names) take precedence over
    resource_filter, which is a regex over the primary resource of the level.
    """

    level: Level = Level.CLUSTER
    resource_filter: str = ""
    node_name: str = ""
    workspace_name: str = ""
    namespace_name: str = ""
    application_name: str = ""
    service_name: str = ""
    workload_kind: str = ""
    workload_name: str = ""
    pod_name: str = ""
    pvc_filter: str = Field("", description="Regex over PVC names. At application level an empty value matches nothing.")
    storage_class_name: str = ""
    owner_filter: str = Field("", description="Raw matcher list for the pod ownership join.")
    node_filter: str = Field("", description="Raw matcher list for the pod node/PVC join.")
    meter_options: Optional[MeterOptions] = None

    @classmethod
    def for_application(
        cls,
        namespace: str,
        application: str,
        components: Iterable[str] = (),
        pvcs: Iterable[str] = (),
        storage_class: str = "",
        meter_options: Optional[MeterOptions] = None,
    ) -> "QueryOptions":
        """
        Builds application-level options from discovered components
        ("Kind:name") and the PVCs mounted by them.
        """
        return cls(
            level=Level.APPLICATION,
            namespace_name=namespace,
            application_name=application,
            resource_filter="|".join(components),
            pvc_filter="|".join(pvcs),
            storage_class_name=storage_class,
            meter_options=meter_options,
        )

    @classmethod
    def for_service(
        cls,
        namespace: str,
        service: str,
        pods: Iterable[str] = (),
        meter_options: Optional[MeterOptions] = None,
    ) -> "QueryOptions":
        """Builds service-level options from the pods selected by the service."""
        return cls(
            level=Level.SERVICE,
            namespace_name=namespace,
            service_name=service,
            resource_filter="|".join(pods),
            meter_options=meter_options,
        )


class Point(BaseModel):
    """A single (timestamp, value) sample."""

    timestamp: int = Field(..., description="Unix timestamp in seconds.")
    value: float


class MetricValue(BaseModel):
    """One series of a result, with the statistics computed by the aggregator."""

    metadata: Dict[str, str] = Field(default_factory=dict)
    sample: Optional[Point] = None
    series: List[Point] = Field(default_factory=list)
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    avg_value: Optional[float] = None
    sum_value: Optional[float] = None
    resource_unit: Optional[str] = None


class MetricData(BaseModel):
    metric_type: Optional[MetricType] = None
    metric_values: List[MetricValue] = Field(default_factory=list)


class Metric(BaseModel):
    """
    A named result. When error is set, metric_data is left empty and must
    not be consumed.
    """

    metric_name: str
    metric_data: MetricData = Field(default_factory=MetricData)
    error: Optional[str] = None


class Metrics(BaseModel):
    results: List[Metric] = Field(default_factory=list)
