# src/kubemeter/data/meter_resources.py
"""
Resource classification of metering metrics.

METER_RESOURCE_MAP lists the meters whose samples are hourly usage levels
(cores, bytes held). Their values are scaled by the number of hours in a
step. Network meters are byte counters already summed over the step and are not
in the map.
"""

from enum import Enum
from types import MappingProxyType


class ResourceType(str, Enum):
    CPU = "cpu"
    MEMORY = "memory"
    NET = "net"
    PVC = "pvc"


RESOURCE_UNITS = MappingProxyType(
    {
        ResourceType.CPU: "cores",
        ResourceType.MEMORY: "bytes",
        ResourceType.NET: "bytes",
        ResourceType.PVC: "bytes",
    }
)

METER_RESOURCE_MAP = MappingProxyType(
    {
        "meter_cluster_cpu_usage": ResourceType.CPU,
        "meter_cluster_memory_usage": ResourceType.MEMORY,
        "meter_cluster_pvc_bytes_total": ResourceType.PVC,
        "meter_node_cpu_usage": ResourceType.CPU,
        "meter_node_memory_usage_wo_cache": ResourceType.MEMORY,
        "meter_node_pvc_bytes_total": ResourceType.PVC,
        "meter_workspace_cpu_usage": ResourceType.CPU,
        "meter_workspace_memory_usage": ResourceType.MEMORY,
        "meter_workspace_pvc_bytes_total": ResourceType.PVC,
        "meter_namespace_cpu_usage": ResourceType.CPU,
        "meter_namespace_memory_usage_wo_cache": ResourceType.MEMORY,
        "meter_namespace_pvc_bytes_total": ResourceType.PVC,
        "meter_application_cpu_usage": ResourceType.CPU,
        "meter_application_memory_usage_wo_cache": ResourceType.MEMORY,
        "meter_application_pvc_bytes_total": ResourceType.PVC,
        "meter_workload_cpu_usage": ResourceType.CPU,
        "meter_workload_memory_usage_wo_cache": ResourceType.MEMORY,
        "meter_workload_pvc_bytes_total": ResourceType.PVC,
        "meter_service_cpu_usage": ResourceType.CPU,
        "meter_service_memory_usage_wo_cache": ResourceType.MEMORY,
        "meter_pod_cpu_usage": ResourceType.CPU,
        "meter_pod_memory_usage_wo_cache": ResourceType.MEMORY,
        "meter_pod_pvc_bytes_total": ResourceType.PVC,
    }
)


def get_resource_type(metric: str):
    """Returns the ResourceType of a meter, or None for non-metering metrics."""
    if metric in METER_RESOURCE_MAP:
        return METER_RESOURCE_MAP[metric]
    if metric.startswith("meter_") and "_net_bytes_" in metric:
        return ResourceType.NET
    return None


def get_resource_unit(metric: str):
    resource_type = get_resource_type(metric)
    if resource_type is None:
        return None
    return RESOURCE_UNITS[resource_type]
