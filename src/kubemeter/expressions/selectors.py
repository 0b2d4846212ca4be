# src/kubemeter/expressions/selectors.py
"""
Level-specific selector builders.

Each builder receives a rendered template and the query options and fills
the positional filter slots. Explicit identity filters always win over
resource_filter regexes, and when neither is present no matcher is emitted.
"""

from types import MappingProxyType
from typing import Callable, List

from ..models.monitoring import Level, QueryOptions
from .placeholders import Placeholder, replace_named, replace_positional

WORKLOAD_KINDS = MappingProxyType(
    {
        "deployment": "Deployment",
        "statefulset": "StatefulSet",
        "daemonset": "DaemonSet",
    }
)


def exact(label: str, value: str) -> str:
    return f'{label}="{value}"'


def regex(label: str, pattern: str) -> str:
    return f'{label}=~"{pattern}"'


def identity_or_regex(label: str, name: str, pattern: str) -> str:
    """Exact match on name if set, else regex match on pattern, else nothing."""
    if name:
        return exact(label, name)
    if pattern:
        return regex(label, pattern)
    return ""


def join_matchers(matchers: List[str], sep: str = ", ") -> str:
    return sep.join(m for m in matchers if m)


# --- PVC selector ---


def pvc_scope_matcher(o: QueryOptions) -> str:
    if o.level == Level.NODE:
        return identity_or_regex("node", o.node_name, o.resource_filter)
    # workspace and namespace PVCs are scoped like the other meters of the level
    if o.level == Level.WORKSPACE:
        return workspace_selector(o)
    if o.level == Level.NAMESPACE:
        return namespace_selector(o)
    if o.level == Level.APPLICATION:
        return exact("namespace", o.namespace_name) if o.namespace_name else ""
    return ""


def pvc_predicates(o: QueryOptions) -> List[str]:
    """
    PVC name and storage class predicates, in that order. At application
    level the name predicate is always present: an application without
    volumes gets persistentvolumeclaim=~"" and therefore matches nothing.
    """
    predicates = []
    if o.level == Level.APPLICATION or o.pvc_filter:
        predicates.append(regex("persistentvolumeclaim", o.pvc_filter))
    if o.storage_class_name:
        predicates.append(exact("storageclass", o.storage_class_name))
    return predicates


def build_pvc_selector(o: QueryOptions) -> str:
    """Conjunction of scope identity, PVC regex and storage class."""
    if o.level not in (Level.NODE, Level.WORKSPACE, Level.NAMESPACE, Level.APPLICATION):
        return ""
    return join_matchers([pvc_scope_matcher(o)] + pvc_predicates(o), sep=",")


def replace_pvc_selector(tmpl: str, o: QueryOptions) -> str:
    return replace_named(tmpl, Placeholder.PVC, build_pvc_selector(o))


# --- positional selectors ---


def workspace_selector(o: QueryOptions) -> str:
    if o.workspace_name:
        return exact("workspace", o.workspace_name)
    if o.resource_filter:
        return join_matchers([regex("workspace", o.resource_filter), 'workspace!=""'])
    return ""


def namespace_selector(o: QueryOptions) -> str:
    # namespaces of one workspace
    if o.workspace_name:
        return join_matchers(
            [
                exact("workspace", o.workspace_name),
                regex("namespace", o.resource_filter) if o.resource_filter else "",
            ]
        )
    return identity_or_regex("namespace", o.namespace_name, o.resource_filter)


def application_selector(o: QueryOptions) -> str:
    """resource_filter holds the application components as "Kind:name" alternatives."""
    return join_matchers(
        [
            exact("namespace", o.namespace_name) if o.namespace_name else "",
            regex("workload", o.resource_filter) if o.resource_filter else "",
        ]
    )


def workload_selector(meter: str, o: QueryOptions) -> str:
    kind = WORKLOAD_KINDS.get(o.workload_kind.lower(), ".*")
    matchers = [exact("namespace", o.namespace_name) if o.namespace_name else ""]
    if o.workload_name and kind != ".*":
        matchers.append(exact("workload", f"{kind}:{o.workload_name}"))
    elif o.workload_name:
        matchers.append(regex("workload", f".*:{o.workload_name}"))
    elif o.resource_filter or o.workload_kind:
        matchers.append(regex("workload", f"{kind}:({o.resource_filter or '.*'})"))
    if meter.endswith("_pvc_bytes_total"):
        matchers.extend(pvc_predicates(o))
    return join_matchers(matchers)


def service_selector(o: QueryOptions) -> str:
    """resource_filter holds the pods selected by the service."""
    return join_matchers(
        [
            regex("pod", o.resource_filter) if o.resource_filter else "",
            exact("namespace", o.namespace_name) if o.namespace_name else "",
        ]
    )


def pod_owner_selector(o: QueryOptions) -> str:
    """Matchers for the kube_pod_owner join."""
    if o.owner_filter:
        return o.owner_filter
    if not o.workload_name:
        return ""
    kind = o.workload_kind.lower()
    if kind == "deployment":
        return join_matchers(
            [exact("owner_kind", "ReplicaSet"), regex("owner_name", f"^{o.workload_name}-[^-]{{1,10}}$")]
        )
    if kind in ("statefulset", "daemonset"):
        return join_matchers([exact("owner_kind", WORKLOAD_KINDS[kind]), exact("owner_name", o.workload_name)])
    return ""


def pod_selector(o: QueryOptions) -> str:
    """Matchers for the kube_pod_info join (namespace, pod and node labels)."""
    if o.node_filter:
        return o.node_filter

    pod = identity_or_regex("pod", o.pod_name, o.resource_filter)
    if o.namespace_name:
        return join_matchers([pod, exact("namespace", o.namespace_name)])

    if o.node_name:
        # pod_name may be given as "namespace/pod" when listing pods of a node
        if o.pod_name and "/" in o.pod_name:
            namespace, name = o.pod_name.split("/", 1)
            return join_matchers([exact("namespace", namespace), exact("pod", name), exact("node", o.node_name)])
        return join_matchers([pod, exact("node", o.node_name)])

    return pod


# --- level builders ---


def make_cluster_meter_expr(meter: str, tmpl: str, o: QueryOptions) -> str:
    return tmpl


def make_node_meter_expr(meter: str, tmpl: str, o: QueryOptions) -> str:
    # node and instance selectors are already resolved by the renderer
    return tmpl


def make_workspace_meter_expr(meter: str, tmpl: str, o: QueryOptions) -> str:
    return replace_positional(tmpl, workspace_selector(o))


def make_namespace_meter_expr(meter: str, tmpl: str, o: QueryOptions) -> str:
    return replace_positional(tmpl, namespace_selector(o))


def make_application_meter_expr(meter: str, tmpl: str, o: QueryOptions) -> str:
    return replace_positional(tmpl, application_selector(o))


def make_workload_meter_expr(meter: str, tmpl: str, o: QueryOptions) -> str:
    return replace_positional(tmpl, workload_selector(meter, o))


def make_service_meter_expr(meter: str, tmpl: str, o: QueryOptions) -> str:
    return replace_positional(tmpl, service_selector(o))


def make_pod_meter_expr(meter: str, tmpl: str, o: QueryOptions) -> str:
    return replace_positional(tmpl, pod_owner_selector(o), pod_selector(o))


LevelBuilder = Callable[[str, str, QueryOptions], str]

LEVEL_BUILDERS = MappingProxyType(
    {
        Level.CLUSTER: make_cluster_meter_expr,
        Level.NODE: make_node_meter_expr,
        Level.WORKSPACE: make_workspace_meter_expr,
        Level.NAMESPACE: make_namespace_meter_expr,
        Level.APPLICATION: make_application_meter_expr,
        Level.WORKLOAD: make_workload_meter_expr,
        Level.SERVICE: make_service_meter_expr,
        Level.POD: make_pod_meter_expr,
    }
)

_missing_levels = set(Level) - set(LEVEL_BUILDERS)
if _missing_levels:
    raise RuntimeError(f"No selector builder registered for levels: {sorted(m.value for m in _missing_levels)}")
