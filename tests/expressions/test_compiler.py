# tests/expressions/test_compiler.py
"""
End-to-end tests for MeterExpressionCompiler over the built-in templates.
"""

import logging
from datetime import timedelta

import pytest

from kubemeter.core.exceptions import MissingMeterOptionsError, UnknownMetricError
from kubemeter.expressions.compiler import MeterExpressionCompiler
from kubemeter.expressions.placeholders import residual_placeholders
from kubemeter.expressions.registry import TemplateRegistry, default_registry
from kubemeter.expressions.renderer import collapse_whitespace
from kubemeter.models.monitoring import Level, MeterOptions, QueryOptions


@pytest.fixture
def compiler():
    return MeterExpressionCompiler()


def _level_of(meter: str) -> Level:
    return Level(meter.split("_")[1])


@pytest.mark.parametrize("meter", list(default_registry()))
def test_no_residual_placeholders_without_filters(compiler, make_options, meter):
    expr = compiler.compile_strict(meter, make_options(_level_of(meter)))
    assert expr
    assert residual_placeholders(expr) == frozenset()
    assert "{," not in expr


@pytest.mark.parametrize("meter", list(default_registry()))
def test_no_residual_placeholders_with_filters(compiler, make_options, meter):
    o = make_options(
        _level_of(meter),
        resource_filter="a|b",
        node_name="node-1",
        namespace_name="ns",
        application_name="app",
        service_name="svc",
        workload_kind="deployment",
        workload_name="api",
        pod_name="api-1",
        pvc_filter="data-.*",
        storage_class_name="fast",
    )
    assert residual_placeholders(compiler.compile_strict(meter, o)) == frozenset()


def test_cluster_meter_renders_step(compiler, make_options):
    o = make_options(Level.CLUSTER, meter_options=MeterOptions(step=timedelta(hours=24)))
    expr = compiler.compile_strict("meter_cluster_cpu_usage", o)
    assert "[24h:1h]" in expr
    assert "$step" not in expr
    assert "\n" not in expr


def test_node_meter_without_filter_has_no_node_clause(compiler, make_options):
    expr = compiler.compile_strict("meter_node_cpu_usage", make_options(Level.NODE))
    assert "node=" not in expr
    assert "node:node_num_cpu:sum{}" in expr
    assert 'kube_pod_container_resource_requests{resource="cpu",unit="core"}' in expr


def test_node_identity_wins_over_regex(compiler, make_options):
    o = make_options(Level.NODE, node_name="node-1", resource_filter="node-.*")
    expr = compiler.compile_strict("meter_node_cpu_usage", o)
    assert 'node:node_num_cpu:sum{node="node-1"}' in expr
    assert "node=~" not in expr


def test_node_regex_filter(compiler, make_options):
    o = make_options(Level.NODE, resource_filter="node-1|node-2")
    expr = compiler.compile_strict("meter_node_memory_usage_wo_cache", o)
    assert 'node:node_memory_bytes_total:sum{node=~"node-1|node-2"}' in expr


def test_node_net_meter_uses_instance_selector(compiler, make_options):
    o = make_options(Level.NODE, node_name="node-1")
    expr = compiler.compile_strict("meter_node_net_bytes_transmitted", o)
    assert 'instance="node-1"' in expr
    # the label_replace capture reference is kept
    assert '"node", "$1", "instance", "(.*)"' in expr


def test_node_net_received_keeps_space_in_capture_reference(compiler, make_options):
    expr = compiler.compile_strict("meter_node_net_bytes_received", make_options(Level.NODE))
    assert '"node", " $1", "instance"' in expr


def test_node_pvc_selector(compiler, make_options):
    o = make_options(Level.NODE, node_name="node-1", pvc_filter="data-.*", storage_class_name="fast")
    expr = compiler.compile_strict("meter_node_pvc_bytes_total", o)
    assert 'namespace:pvc_bytes_pod:sum{node="node-1",persistentvolumeclaim=~"data-.*",storageclass="fast"}' in expr


def test_workspace_selectors(compiler, make_options):
    expr = compiler.compile_strict(
        "meter_workspace_net_bytes_transmitted", make_options(Level.WORKSPACE, workspace_name="team-a")
    )
    assert 'kube_namespace_labels{workspace="team-a"}' in expr

    expr = compiler.compile_strict(
        "meter_workspace_net_bytes_transmitted", make_options(Level.WORKSPACE, resource_filter="team-.*")
    )
    assert 'kube_namespace_labels{workspace=~"team-.*", workspace!=""}' in expr


def test_namespace_selectors(compiler, make_options):
    expr = compiler.compile_strict(
        "meter_namespace_net_bytes_received", make_options(Level.NAMESPACE, namespace_name="shop")
    )
    assert 'kube_namespace_labels{namespace="shop"}' in expr

    o = make_options(Level.NAMESPACE, workspace_name="team-a", resource_filter="shop|billing")
    expr = compiler.compile_strict("meter_namespace_net_bytes_received", o)
    assert 'kube_namespace_labels{workspace="team-a", namespace=~"shop|billing"}' in expr


def test_namespace_pvc_selector(compiler, make_options):
    o = make_options(Level.NAMESPACE, namespace_name="shop")
    expr = compiler.compile_strict("meter_namespace_pvc_bytes_total", o)
    assert 'namespace:pvc_bytes_pod:sum{namespace="shop"}' in expr


def test_namespace_pvc_selector_honours_regex_and_workspace(compiler, make_options):
    expr = compiler.compile_strict(
        "meter_namespace_pvc_bytes_total", make_options(Level.NAMESPACE, resource_filter="shop")
    )
    assert 'namespace:pvc_bytes_pod:sum{namespace=~"shop"}' in expr

    expr = compiler.compile_strict(
        "meter_namespace_pvc_bytes_total", make_options(Level.NAMESPACE, workspace_name="team-a")
    )
    assert 'namespace:pvc_bytes_pod:sum{workspace="team-a"}' in expr

    o = make_options(Level.NAMESPACE, resource_filter="shop", pvc_filter="data-.*")
    expr = compiler.compile_strict("meter_namespace_pvc_bytes_total", o)
    assert 'namespace:pvc_bytes_pod:sum{namespace=~"shop",persistentvolumeclaim=~"data-.*"}' in expr


def test_workspace_pvc_selector_honours_regex(compiler, make_options):
    expr = compiler.compile_strict(
        "meter_workspace_pvc_bytes_total", make_options(Level.WORKSPACE, resource_filter="team-.*")
    )
    assert 'namespace:pvc_bytes_pod:sum{workspace=~"team-.*", workspace!=""}' in expr


def test_application_with_components(compiler, meter_options):
    o = QueryOptions.for_application(
        "shop",
        "web-shop",
        components=["Deployment:web", "StatefulSet:db"],
        pvcs=["data-db-0"],
        meter_options=meter_options,
    )
    expr = compiler.compile_strict("meter_application_cpu_usage", o)
    assert 'namespace:workload_cpu_usage:sum{namespace="shop", workload=~"Deployment:web|StatefulSet:db"}' in expr
    assert '"application", "web-shop"' in expr

    expr = compiler.compile_strict("meter_application_pvc_bytes_total", o)
    assert 'namespace:pvc_bytes_pod:sum{namespace="shop",persistentvolumeclaim=~"data-db-0"}' in expr


def test_application_without_pvcs_matches_nothing(compiler, meter_options):
    o = QueryOptions.for_application("shop", "web-shop", components=["Deployment:web"], meter_options=meter_options)
    expr = compiler.compile_strict("meter_application_pvc_bytes_total", o)
    assert 'namespace:pvc_bytes_pod:sum{namespace="shop",persistentvolumeclaim=~""}' in expr


def test_workload_exact_and_regex(compiler, make_options):
    o = make_options(Level.WORKLOAD, namespace_name="shop", workload_kind="Deployment", workload_name="web")
    expr = compiler.compile_strict("meter_workload_net_bytes_transmitted", o)
    assert 'namespace:workload_net_bytes_transmitted:sum{namespace="shop", workload="Deployment:web"}' in expr

    o = make_options(Level.WORKLOAD, namespace_name="shop", workload_kind="statefulset", resource_filter="db|cache")
    expr = compiler.compile_strict("meter_workload_net_bytes_transmitted", o)
    assert 'workload=~"StatefulSet:(db|cache)"' in expr


def test_workload_name_without_kind_matches_any_kind(compiler, make_options):
    o = make_options(Level.WORKLOAD, namespace_name="shop", workload_name="web")
    expr = compiler.compile_strict("meter_workload_net_bytes_transmitted", o)
    assert 'namespace:workload_net_bytes_transmitted:sum{namespace="shop", workload=~".*:web"}' in expr

    o = make_options(Level.WORKLOAD, namespace_name="shop", workload_kind="cronjob", workload_name="web")
    expr = compiler.compile_strict("meter_workload_net_bytes_transmitted", o)
    assert 'workload=~".*:web"' in expr


def test_workload_pvc_meter_carries_pvc_predicates(compiler, make_options):
    o = make_options(Level.WORKLOAD, namespace_name="shop", pvc_filter="data-.*", storage_class_name="fast")
    expr = compiler.compile_strict("meter_workload_pvc_bytes_total", o)
    assert 'namespace:pvc_bytes_pod:sum{namespace="shop", persistentvolumeclaim=~"data-.*", storageclass="fast"}' in expr


def test_service_selector(compiler, meter_options):
    o = QueryOptions.for_service("shop", "web", pods=["web-1", "web-2"], meter_options=meter_options)
    expr = compiler.compile_strict("meter_service_net_bytes_transmitted", o)
    assert 'kube_pod_info{pod=~"web-1|web-2", namespace="shop"}' in expr
    assert '"service", "web"' in expr


def test_service_received_keeps_grouping_typo(compiler, meter_options):
    o = QueryOptions.for_service("shop", "web", pods=["web-1"], meter_options=meter_options)
    expr = compiler.compile_strict("meter_service_net_bytes_received", o)
    assert "sum by (namepace, pod)" in expr


def test_pod_owner_and_node_filters(compiler, make_options):
    o = make_options(Level.POD, owner_filter='owner_kind="Deployment"', node_filter='node="node-1"')
    expr = compiler.compile_strict("meter_pod_cpu_usage", o)
    assert (
        'kube_pod_owner{owner_kind="Deployment"} * on (namespace, pod) group_left(node) kube_pod_info{node="node-1"}'
        in expr
    )
    assert "$1" not in expr and "$2" not in expr


def test_pod_owner_derived_from_deployment(compiler, make_options):
    o = make_options(Level.POD, namespace_name="shop", workload_kind="deployment", workload_name="web")
    expr = compiler.compile_strict("meter_pod_net_bytes_transmitted", o)
    assert 'kube_pod_owner{owner_kind="ReplicaSet", owner_name=~"^web-[^-]{1,10}$"}' in expr
    assert 'kube_pod_info{namespace="shop"}' in expr


def test_pod_of_node_splits_namespace(compiler, make_options):
    o = make_options(Level.POD, node_name="node-1", pod_name="shop/web-1")
    expr = compiler.compile_strict("meter_pod_net_bytes_received", o)
    assert 'kube_pod_info{namespace="shop", pod="web-1", node="node-1"}' in expr


def test_missing_meter_options_raises(compiler):
    with pytest.raises(MissingMeterOptionsError):
        compiler.compile_strict("meter_cluster_cpu_usage", QueryOptions(level=Level.CLUSTER))


def test_unknown_meter_raises(compiler, make_options, caplog):
    with caplog.at_level(logging.ERROR), pytest.raises(UnknownMetricError):
        compiler.compile_strict("meter_cluster_gpu_usage", make_options(Level.CLUSTER))
    assert "invalid meter meter_cluster_gpu_usage" in caplog.text


def test_lenient_compile_returns_empty_expression(compiler, make_options, caplog):
    with caplog.at_level(logging.ERROR):
        assert compiler.compile("meter_cluster_gpu_usage", make_options(Level.CLUSTER)) == ""
        assert compiler.compile("meter_cluster_cpu_usage", QueryOptions(level=Level.CLUSTER)) == ""
    assert "invalid meter meter_cluster_gpu_usage" in caplog.text


def test_unsupported_placeholder_is_logged_and_blanked(make_options, caplog):
    compiler = MeterExpressionCompiler(TemplateRegistry({"meter_cluster_custom": "foo{$1}[$step:1h]"}))
    with caplog.at_level(logging.WARNING):
        expr = compiler.compile_strict("meter_cluster_custom", make_options(Level.CLUSTER, namespace_name="x"))
    assert expr == "foo{}[1h:1h]"
    assert "$1" in caplog.text


@pytest.mark.parametrize("meter", default_registry().meters_for_level(Level.CLUSTER))
def test_cluster_template_is_used_verbatim(compiler, make_options, meter):
    expected = collapse_whitespace(default_registry().get(meter)).replace("$step", "1h")
    assert compiler.compile_strict(meter, make_options(Level.CLUSTER)) == expected
