# src/kubemeter/cli/meter.py
"""
Implements the `compile`, `meter` and `list-meters` commands.
"""

import logging
from typing import List, Optional

import typer
from typing_extensions import Annotated

from ..core.exceptions import KubeMeterError, MeterValidationError
from ..core.factory import get_operator
from ..expressions.compiler import MeterExpressionCompiler
from ..expressions.registry import default_registry
from ..models.monitoring import Level, MeterOptions
from ..reporters.console_reporter import ConsoleReporter
from .utils import build_query_options, parse_step, parse_time, utc_now

logger = logging.getLogger(__name__)

LevelOption = Annotated[Level, typer.Option("--level", "-l", case_sensitive=False, help="Aggregation level.")]
ResourceFilterOption = Annotated[
    str, typer.Option("--resource-filter", "-f", help="Regex over the resource names of the level.")
]
NodeOption = Annotated[str, typer.Option("--node", help="Exact node name.")]
WorkspaceOption = Annotated[str, typer.Option("--workspace", help="Exact workspace name.")]
NamespaceOption = Annotated[str, typer.Option("--namespace", "-n", help="Exact namespace name.")]
ApplicationOption = Annotated[str, typer.Option("--application", help="Application name used to relabel results.")]
ServiceOption = Annotated[str, typer.Option("--service", help="Service name used to relabel results.")]
WorkloadKindOption = Annotated[
    str, typer.Option("--workload-kind", help="deployment, statefulset or daemonset.")
]
WorkloadNameOption = Annotated[str, typer.Option("--workload-name", help="Exact workload name.")]
PodOption = Annotated[str, typer.Option("--pod", help="Exact pod name ('namespace/pod' on a node).")]
PVCFilterOption = Annotated[str, typer.Option("--pvc-filter", help="Regex over PVC names.")]
StorageClassOption = Annotated[str, typer.Option("--storage-class", help="Exact storage class name.")]
OwnerFilterOption = Annotated[str, typer.Option("--owner-filter", help="Raw matchers for the pod owner join.")]
NodeFilterOption = Annotated[str, typer.Option("--node-filter", help="Raw matchers for the pod info join.")]
StepOption = Annotated[str, typer.Option("--step", help="Step as a whole number of hours, e.g. '1h', '24h'.")]


def compile_meter(
    meter: Annotated[str, typer.Argument(help="Meter identifier, e.g. meter_node_cpu_usage.")],
    level: LevelOption = Level.CLUSTER,
    resource_filter: ResourceFilterOption = "",
    node: NodeOption = "",
    workspace: WorkspaceOption = "",
    namespace: NamespaceOption = "",
    application: ApplicationOption = "",
    service: ServiceOption = "",
    workload_kind: WorkloadKindOption = "",
    workload_name: WorkloadNameOption = "",
    pod: PodOption = "",
    pvc_filter: PVCFilterOption = "",
    storage_class: StorageClassOption = "",
    owner_filter: OwnerFilterOption = "",
    node_filter: NodeFilterOption = "",
    step: StepOption = "1h",
):
    """
    Print the PromQL expression compiled for a meter.
    """
    options = build_query_options(
        level,
        resource_filter=resource_filter,
        node=node,
        workspace=workspace,
        namespace=namespace,
        application=application,
        service=service,
        workload_kind=workload_kind,
        workload_name=workload_name,
        pod=pod,
        pvc_filter=pvc_filter,
        storage_class=storage_class,
        owner_filter=owner_filter,
        node_filter=node_filter,
    )
    options.meter_options = MeterOptions(step=parse_step(step))

    expr = MeterExpressionCompiler().compile(meter, options)
    if not expr:
        typer.echo(f"Error: could not compile meter '{meter}'", err=True)
        raise typer.Exit(code=1)

    typer.echo(expr)


def run_meters(
    meters: Annotated[List[str], typer.Argument(help="One or more meter identifiers.")],
    level: LevelOption = Level.CLUSTER,
    resource_filter: ResourceFilterOption = "",
    node: NodeOption = "",
    workspace: WorkspaceOption = "",
    namespace: NamespaceOption = "",
    application: ApplicationOption = "",
    service: ServiceOption = "",
    workload_kind: WorkloadKindOption = "",
    workload_name: WorkloadNameOption = "",
    pod: PodOption = "",
    pvc_filter: PVCFilterOption = "",
    storage_class: StorageClassOption = "",
    owner_filter: OwnerFilterOption = "",
    node_filter: NodeFilterOption = "",
    step: StepOption = "1h",
    start: Annotated[Optional[str], typer.Option("--start", help="ISO 8601 start of a ranged query.")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="ISO 8601 end of a ranged query.")] = None,
    time: Annotated[Optional[str], typer.Option("--time", help="ISO 8601 evaluation time (default: now).")] = None,
):
    """
    Evaluate meters against the backend and display the results.

    With --start and --end the meters are evaluated over (start, end] at the
    given step; otherwise for the hour ending at --time.
    """
    options = build_query_options(
        level,
        resource_filter=resource_filter,
        node=node,
        workspace=workspace,
        namespace=namespace,
        application=application,
        service=service,
        workload_kind=workload_kind,
        workload_name=workload_name,
        pod=pod,
        pvc_filter=pvc_filter,
        storage_class=storage_class,
        owner_filter=owner_filter,
        node_filter=node_filter,
    )

    if bool(start) != bool(end):
        raise typer.BadParameter("--start and --end must be given together.")

    try:
        operator = get_operator()
        if start and end:
            metrics = operator.get_named_meters_over_time(
                meters, parse_time(start), parse_time(end), parse_step(step), options
            )
        else:
            metrics = operator.get_named_meters(meters, parse_time(time, default=utc_now()), options)
    except MeterValidationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except KubeMeterError as e:
        logger.error("Metering failed: %s", e)
        raise typer.Exit(code=1)

    ConsoleReporter().report(metrics)


def list_meters(
    level: Annotated[
        Optional[Level], typer.Option("--level", "-l", case_sensitive=False, help="Only list meters of a level.")
    ] = None,
):
    """
    List the registered meter identifiers.
    """
    registry = default_registry()
    names = registry.meters_for_level(level) if level else list(registry)
    for name in names:
        typer.echo(name)
