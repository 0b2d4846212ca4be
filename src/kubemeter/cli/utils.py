# src/kubemeter/cli/utils.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import typer

from ..models.monitoring import Level, QueryOptions
from ..utils.date_utils import ensure_utc, parse_duration

logger = logging.getLogger(__name__)


def parse_step(step: str) -> timedelta:
    """Parses a --step value, turning format errors into a usage error."""
    try:
        return parse_duration(step)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def parse_time(value: Optional[str], default: Optional[datetime] = None) -> Optional[datetime]:
    """Parses an ISO 8601 --start/--end/--time value into an aware UTC datetime."""
    if not value:
        return default
    try:
        return ensure_utc(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def build_query_options(
    level: Level,
    resource_filter: str = "",
    node: str = "",
    workspace: str = "",
    namespace: str = "",
    application: str = "",
    service: str = "",
    workload_kind: str = "",
    workload_name: str = "",
    pod: str = "",
    pvc_filter: str = "",
    storage_class: str = "",
    owner_filter: str = "",
    node_filter: str = "",
) -> QueryOptions:
    return QueryOptions(
        level=level,
        resource_filter=resource_filter or "",
        node_name=node or "",
        workspace_name=workspace or "",
        namespace_name=namespace or "",
        application_name=application or "",
        service_name=service or "",
        workload_kind=workload_kind or "",
        workload_name=workload_name or "",
        pod_name=pod or "",
        pvc_filter=pvc_filter or "",
        storage_class_name=storage_class or "",
        owner_filter=owner_filter or "",
        node_filter=node_filter or "",
    )
