# tests/expressions/test_registry.py
"""
Tests for the TemplateRegistry.
"""

import logging

import pytest

from kubemeter.core.exceptions import UnknownMetricError, UsageError
from kubemeter.expressions.placeholders import Placeholder
from kubemeter.expressions.registry import TemplateRegistry, default_registry
from kubemeter.models.monitoring import Level


def test_default_registry_contains_all_meters():
    registry = default_registry()
    assert len(registry) == 39
    assert "meter_cluster_cpu_usage" in registry
    assert "meter_pod_pvc_bytes_total" in registry


def test_default_registry_is_singleton():
    assert default_registry() is default_registry()


def test_lookup_unknown_metric_logs_and_returns_none(caplog):
    with caplog.at_level(logging.ERROR):
        assert default_registry().lookup("meter_cluster_gpu_usage") is None
    assert "invalid meter meter_cluster_gpu_usage" in caplog.text


def test_get_unknown_metric_raises():
    with pytest.raises(UnknownMetricError) as exc_info:
        default_registry().get("nope")
    assert isinstance(exc_info.value, UsageError)
    assert exc_info.value.metric == "nope"
    assert str(exc_info.value) == "invalid meter nope"


def test_registry_is_read_only():
    templates = {"meter_cluster_x": "x[$step:1h]"}
    registry = TemplateRegistry(templates)
    templates["meter_cluster_y"] = "y"
    assert "meter_cluster_y" not in registry
    with pytest.raises(TypeError):
        registry._templates["meter_cluster_z"] = "z"


def test_meters_for_level():
    meters = default_registry().meters_for_level(Level.SERVICE)
    assert meters == [
        "meter_service_cpu_usage",
        "meter_service_memory_usage_wo_cache",
        "meter_service_net_bytes_transmitted",
        "meter_service_net_bytes_received",
    ]
    for level in Level:
        assert default_registry().meters_for_level(level)


def test_placeholders_of_pod_meter():
    assert default_registry().placeholders("meter_pod_net_bytes_received") == {
        Placeholder.STEP,
        Placeholder.FILTER_1,
        Placeholder.FILTER_2,
    }
