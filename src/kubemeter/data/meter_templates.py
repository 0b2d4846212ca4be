# src/kubemeter/data/meter_templates.py
"""
PromQL templates for every metering metric, keyed by metric identifier.

Templates are level-agnostic text. Range windows are fixed at one hour and
the number of hours covered by a step is injected through `$step`. The
remaining placeholders are resolved by the renderer and level builders:

    $step, $nodeSelector, $instanceSelector, $pvc, $app, $svc
    $1, $2 (positional filter slots, only inside `{...}` matchers)

A `$1` outside of label matchers is a label_replace capture reference and is
left alone.

Usage metrics arbitrate between request and usage with a three-way union:
(request >= usage) or (usage > request) or usage-alone. The third branch
keeps a result for label sets where one side has no series.
"""

from types import MappingProxyType

_METER_TEMPLATES = {
    # cluster
    "meter_cluster_cpu_usage": """
round(
    (
        sum(
            sum_over_time(avg_over_time(kube_pod_container_resource_requests{resource="cpu",unit="core"}[1h])[$step:1h])
        ) >=
        (
            sum_over_time(avg_over_time(:node_cpu_utilisation:avg1m[1h])[$step:1h]) *
            sum(
                sum_over_time(avg_over_time(node:node_num_cpu:sum[1h])[$step:1h])
            )
        )
    )
    or
    (
        (
            sum_over_time(avg_over_time(:node_cpu_utilisation:avg1m[1h])[$step:1h]) *
            sum(
                sum_over_time(avg_over_time(node:node_num_cpu:sum[1h])[$step:1h])
            )
        ) >
        sum(
            sum_over_time(avg_over_time(kube_pod_container_resource_requests{resource="cpu",unit="core"}[1h])[$step:1h])
        )
    ),
    0.001
)""",
    "meter_cluster_memory_usage": """
round(
    (
        sum(
            sum_over_time(avg_over_time(kube_pod_container_resource_requests{resource="memory",unit="byte"}[1h])[$step:1h])
        ) >=
        (
            sum_over_time(avg_over_time(:node_memory_utilisation:[1h])[$step:1h]) *
            sum(
                sum_over_time(avg_over_time(node:node_memory_bytes_total:sum[1h])[$step:1h])
            )
        )
    )
    or
    (
        (
            sum_over_time(avg_over_time(:node_memory_utilisation:[1h])[$step:1h]) *
            sum(
                sum_over_time(avg_over_time(node:node_memory_bytes_total:sum[1h])[$step:1h])
            )
        ) >
        sum(
            sum_over_time(avg_over_time(kube_pod_container_resource_requests{resource="memory",unit="byte"}[1h])[$step:1h])
        )
    ),
    1
)""",
    "meter_cluster_net_bytes_transmitted": """
round(
    sum(
        sum_over_time(
            increase(
                node_network_transmit_bytes_total{
                    job="node-exporter",
                    device!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)"
                }[1h]
            )[$step:1h]
        )
    ),
    1
)""",
    "meter_cluster_net_bytes_received": """
round(
    sum(
        sum_over_time(
            increase(
                node_network_receive_bytes_total{
                    job="node-exporter",
                    device!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)"
                }[1h]
            )[$step:1h]
        )
    ),
    1
)""",
    "meter_cluster_pvc_bytes_total": """
sum(
    topk(1, sum_over_time(avg_over_time(namespace:pvc_bytes_pod:sum{}[1h])[$step:1h])) by (persistentvolumeclaim)
)""",
    # node
    "meter_node_cpu_usage": """
round(
    (
        sum(
            sum_over_time(avg_over_time(kube_pod_container_resource_requests{$nodeSelector, resource="cpu",unit="core"}[1h])[$step:1h])
        ) by (node) >=
        sum(
            sum_over_time(avg_over_time(node:node_cpu_utilisation:avg1m{$nodeSelector}[1h])[$step:1h]) *
            sum_over_time(avg_over_time(node:node_num_cpu:sum{$nodeSelector}[1h])[$step:1h])
        ) by (node)
    )
    or
    (
        sum(
            sum_over_time(avg_over_time(node:node_cpu_utilisation:avg1m{$nodeSelector}[1h])[$step:1h]) *
            sum_over_time(avg_over_time(node:node_num_cpu:sum{$nodeSelector}[1h])[$step:1h])
        ) by (node) >
        sum(
            sum_over_time(avg_over_time(kube_pod_container_resource_requests{$nodeSelector, resource="cpu",unit="core"}[1h])[$step:1h])
        ) by (node)
    )
    or
    (
        sum(
            sum_over_time(avg_over_time(node:node_cpu_utilisation:avg1m{$nodeSelector}[1h])[$step:1h]) *
            sum_over_time(avg_over_time(node:node_num_cpu:sum{$nodeSelector}[1h])[$step:1h])
        ) by (node)
    ),
    0.001
)""",
    "meter_node_memory_usage_wo_cache": """
round(
    (
        sum(
            sum_over_time(avg_over_time(kube_pod_container_resource_requests{$nodeSelector, resource="memory",unit="byte"}[1h])[$step:1h])
        ) by (node) >=
        sum(
            sum_over_time(avg_over_time(node:node_memory_bytes_total:sum{$nodeSelector}[1h])[$step:1h]) -
            sum_over_time(avg_over_time(node:node_memory_bytes_available:sum{$nodeSelector}[1h])[$step:1h])
        ) by (node)
    )
    or
    (
        sum(
            sum_over_time(avg_over_time(node:node_memory_bytes_total:sum{$nodeSelector}[1h])[$step:1h]) -
            sum_over_time(avg_over_time(node:node_memory_bytes_available:sum{$nodeSelector}[1h])[$step:1h])
        ) by (node) >
        sum(
            sum_over_time(avg_over_time(kube_pod_container_resource_requests{$nodeSelector, resource="memory",unit="byte"}[1h])[$step:1h])
        ) by (node)
    )
    or
    (
        sum(
            sum_over_time(avg_over_time(node:node_memory_bytes_total:sum{$nodeSelector}[1h])[$step:1h]) -
            sum_over_time(avg_over_time(node:node_memory_bytes_available:sum{$nodeSelector}[1h])[$step:1h])
        ) by (node)
    ),
    0.001
)""",
    "meter_node_net_bytes_transmitted": """
round(
    sum by (node) (
        sum without (instance) (
            label_replace(
                sum_over_time(
                    increase(
                        node_network_transmit_bytes_total{
                            job="node-exporter",
                            device!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)",
                            $instanceSelector
                        }[1h]
                    )[$step:1h]
                ),
                "node",
                "$1",
                "instance",
                "(.*)"
            )
        )
    ),
    1
)""",
    # The replacement string below spans a line break and renders as " $1".
    "meter_node_net_bytes_received": """
round(
    sum by (node) (
        sum without (instance) (
            label_replace(
                sum_over_time(
                    increase(
                        node_network_receive_bytes_total{
                            job="node-exporter",
                            device!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)",
                            $instanceSelector
                        }[1h]
                    )[$step:1h]
                ),
                "node", "
                $1",
                "instance",
                "(.*)"
            )
        )
    ),
    1
)""",
    "meter_node_pvc_bytes_total": """
sum(
    topk(
        1,
        sum_over_time(
            avg_over_time(
                namespace:pvc_bytes_pod:sum{$pvc}[1h]
            )[$step:1h]
        )
    ) by (persistentvolumeclaim, node)
) by (node)""",
    # workspace
    "meter_workspace_cpu_usage": """
round(
    (
        sum by (workspace) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job",
                        namespace!="",
                        resource="cpu",
                        $1
                    }[1h]
                )[$step:1h]
            )
        ) >=
        sum by (workspace) (
            sum_over_time(
                avg_over_time(namespace:container_cpu_usage_seconds_total:sum_rate{namespace!="", $1}[1h])[$step:1h]
            )
        )
    )
    or
    (
        sum by (workspace) (
            sum_over_time(
                avg_over_time(namespace:container_cpu_usage_seconds_total:sum_rate{namespace!="", $1}[1h])[$step:1h]
            )
        ) >
        sum by (workspace) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job",
                        namespace!="",
                        resource="cpu",
                        $1
                    }[1h]
                )[$step:1h]
            )
        )
    )
    or
    (
        sum by (workspace) (
            sum_over_time(
                avg_over_time(namespace:container_cpu_usage_seconds_total:sum_rate{namespace!="", $1}[1h])[$step:1h]
            )
        )
    ),
    0.001
)""",
    "meter_workspace_memory_usage": """
round(
    (
        sum by (workspace) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job",
                        namespace!="",
                        resource="memory",
                        $1
                    }[1h]
                )[$step:1h]
            )
        ) >=
        sum by (workspace) (
            sum_over_time(avg_over_time(namespace:container_memory_usage_bytes:sum{namespace!="", $1}[1h])[$step:1h])
        )
    )
    or
    (
        sum by (workspace) (
            sum_over_time(avg_over_time(namespace:container_memory_usage_bytes:sum{namespace!="", $1}[1h])[$step:1h])
        ) >
        sum by (workspace) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                    owner_kind!="Job", namespace!="", resource="memory", $1
                    }[1h]
                )[$step:1h]
            )
        )
    )
    or
    (
        sum by (workspace) (
            sum_over_time(avg_over_time(namespace:container_memory_usage_bytes:sum{namespace!="", $1}[1h])[$step:1h])
        )
    ),
    1
)""",
    "meter_workspace_net_bytes_transmitted": """
round(
    sum by (workspace) (
        sum by (namespace) (
            sum_over_time(
                increase(
                    container_network_transmit_bytes_total{
                        namespace!="",
                        pod!="",
                        interface!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)",
                        job="kubelet"
                    }[1h]
                )[$step:1h]
            )
        ) * on (namespace) group_left(workspace)
        kube_namespace_labels{$1}
    ) or on(workspace) max by(workspace) (kube_namespace_labels{$1} * 0), 1)""",
    "meter_workspace_net_bytes_received": """
round(
    sum by (workspace) (
        sum by (namespace) (
            sum_over_time(
                increase(
                    container_network_receive_bytes_total{
                        namespace!="",
                        pod!="",
                        interface!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)",
                        job="kubelet"
                    }[1h]
                )[$step:1h]
            )
        ) * on (namespace) group_left(workspace)
        kube_namespace_labels{$1}
    ) or on(workspace) max by(workspace) (kube_namespace_labels{$1} * 0), 1)""",
    "meter_workspace_pvc_bytes_total": """
sum (
    topk(
        1,
        sum_over_time(
            avg_over_time(namespace:pvc_bytes_pod:sum{$pvc}[1h])[$step:1h]
        )
    ) by (persistentvolumeclaim, workspace)
) by (workspace)""",
    # namespace
    "meter_namespace_cpu_usage": """
round(
    (
        sum by (namespace) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job",
                        namespace!="",
                        resource="cpu",
                        $1
                    }[1h]
                )[$step:1h]
            )
        ) >=
        sum by (namespace) (
            sum_over_time(
                avg_over_time(namespace:container_cpu_usage_seconds_total:sum_rate{namespace!="", $1}[1h])[$step:1h]
            )
        )
    )
    or
    (
        sum by (namespace) (
            sum_over_time(avg_over_time(namespace:container_cpu_usage_seconds_total:sum_rate{namespace!="", $1}[1h])[$step:1h])
        ) >
        sum by (namespace) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{owner_kind!="Job", namespace!="", resource="cpu", $1}[1h]
                )[$step:1h]
            )
        )
    )
    or
    (
        sum by (namespace) (
            sum_over_time(
                avg_over_time(
                    namespace:container_cpu_usage_seconds_total:sum_rate{namespace!="", $1}[1h]
                )[$step:1h]
            )
        )
    ),
    0.001
)""",
    "meter_namespace_memory_usage_wo_cache": """
round(
    (
        sum by (namespace) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job",
                        namespace!="",
                        resource="memory",
                        $1
                    }[1h]
                )[$step:1h]
            )
        ) >=
        sum by (namespace) (
            sum_over_time(avg_over_time(namespace:container_memory_usage_bytes_wo_cache:sum{namespace!="", $1}[1h])[$step:1h])
        )
    )
    or
    (
        sum by (namespace) (
            sum_over_time(avg_over_time(namespace:container_memory_usage_bytes_wo_cache:sum{namespace!="", $1}[1h])[$step:1h])
        ) >
        sum by (namespace) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job", namespace!="", resource="memory", $1
                    }[1h]
                )[$step:1h]
            )
        )
    )
    or
    (
        sum by (namespace) (
            sum_over_time(
                avg_over_time(
                    namespace:container_memory_usage_bytes_wo_cache:sum{namespace!="", $1}[1h]
                )[$step:1h]
            )
        )
    ),
    1
)""",
    "meter_namespace_net_bytes_transmitted": """
round(
    sum by (namespace) (
        sum_over_time(
            increase(
                container_network_transmit_bytes_total{
                    namespace!="",
                    pod!="",
                    interface!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)",
                    job="kubelet"
                }[1h]
            )[$step:1h]
        )
        * on (namespace) group_left(workspace)
        kube_namespace_labels{$1}
    )
    or on(namespace) max by(namespace) (kube_namespace_labels{$1} * 0), 1)""",
    "meter_namespace_net_bytes_received": """
round(
    sum by (namespace) (
        sum_over_time(
            increase(
                container_network_receive_bytes_total{
                    namespace!="",
                    pod!="",
                    interface!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)",
                    job="kubelet"
                }[1h]
            )[$step:1h]
        )
        * on (namespace) group_left(workspace)
        kube_namespace_labels{$1}
    )
    or on(namespace) max by(namespace) (kube_namespace_labels{$1} * 0), 1)""",
    "meter_namespace_pvc_bytes_total": """
sum (
    topk(
        1,
        sum_over_time(
            avg_over_time(namespace:pvc_bytes_pod:sum{$pvc}[1h])[$step:1h]
        )
    ) by (persistentvolumeclaim, namespace)
) by (namespace)""",
    # application
    "meter_application_cpu_usage": """
round(
    (
        sum by (namespace, application) (
            label_replace(
                sum_over_time(
                    avg_over_time(
                        namespace:kube_workload_resource_request:sum{workload!~"Job:.+", resource="cpu", $1}[1h]
                    )[$step:1h]
                ),
                "application",
                "$app",
                "",
                ""
            )
        ) >=
        sum by (namespace, application) (
            label_replace(
                sum_over_time(avg_over_time(namespace:workload_cpu_usage:sum{$1}[1h])[$step:1h]),
                "application",
                "$app",
                "",
                ""
            )
        )
    )
    or
    (
        sum by (namespace, application) (
            label_replace(
                sum_over_time(avg_over_time(namespace:workload_cpu_usage:sum{$1}[1h])[$step:1h]),
                "application",
                "$app",
                "",
                ""
            )
        ) >
        sum by (namespace, application) (
            label_replace(
                sum_over_time(
                    avg_over_time(
                        namespace:kube_workload_resource_request:sum{workload!~"Job:.+", resource="cpu", $1}[1h]
                    )[$step:1h]
                ),
                "application",
                "$app",
                "",
                ""
            )
        )
    )
    or
    (
        sum by (namespace, application) (
            label_replace(
                sum_over_time(avg_over_time(namespace:workload_cpu_usage:sum{$1}[1h])[$step:1h]),
                "application",
                "$app",
                "",
                ""
            )
        )
    ),
    0.001
)""",
    "meter_application_memory_usage_wo_cache": """
round(
    (
        sum by (namespace, application) (
            label_replace(
                sum_over_time(
                    avg_over_time(
                        namespace:kube_workload_resource_request:sum{workload!~"Job:.+", resource="memory", $1}[1h]
                    )[$step:1h]
                ),
                "application",
                "$app",
                "",
                ""
            )
        ) >=
        sum by (namespace, application) (
            label_replace(
                sum_over_time(avg_over_time(namespace:workload_memory_usage_wo_cache:sum{$1}[1h])[$step:1h]),
                "application",
                "$app",
                "",
                ""
            )
        )
    )
    or
    (
        sum by (namespace, application) (
            label_replace(
                sum_over_time(avg_over_time(namespace:workload_memory_usage_wo_cache:sum{$1}[1h])[$step:1h]),
                "application",
                "$app",
                "",
                ""
            )
        ) >
        sum by (namespace, application) (
            label_replace(
                sum_over_time(
                    avg_over_time(
                        namespace:kube_workload_resource_request:sum{workload!~"Job:.+", resource="memory", $1}[1h]
                    )[$step:1h]
                ),
                "application",
                "$app",
                "",
                ""
            )
        )
    )
    or
    (
        sum by (namespace, application) (
            label_replace(
                sum_over_time(avg_over_time(namespace:workload_memory_usage_wo_cache:sum{$1}[1h])[$step:1h]),
                "application",
                "$app",
                "",
                ""
            )
        )
    ),
    1
)""",
    "meter_application_net_bytes_transmitted": """
round(
    sum by (namespace, application) (
        label_replace(
            sum_over_time(
                increase(
                    namespace:workload_net_bytes_transmitted:sum{$1}[1h]
                )[$step:1h]
            ),
            "application",
            "$app",
            "",
            ""
        )
    ),
    1
)""",
    "meter_application_net_bytes_received": """
sum by (namespace, application) (
    label_replace(
        sum_over_time(
            increase(
                namespace:workload_net_bytes_received:sum{$1}[1h]
            )[$step:1h]
        ),
        "application",
        "$app",
        "",
        ""
    )
)""",
    "meter_application_pvc_bytes_total": """
sum by (namespace, application) (
    label_replace(
        topk(1, sum_over_time(avg_over_time(namespace:pvc_bytes_pod:sum{$pvc}[1h])[$step:1h])) by (persistentvolumeclaim),
        "application",
        "$app",
        "",
        ""
    )
)""",
    # workload
    "meter_workload_cpu_usage": """
round(
    (
        sum by (namespace, workload) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_workload_resource_request:sum{
                        workload!~"Job:.+", resource="cpu", $1
                    }[1h]
                )[$step:1h]
            )
        ) >=
        sum by (namespace, workload) (
            sum_over_time(avg_over_time(namespace:workload_cpu_usage:sum{$1}[1h])[$step:1h])
        )
    )
    or
    (
        sum by (namespace, workload) (
            sum_over_time(avg_over_time(namespace:workload_cpu_usage:sum{$1}[1h])[$step:1h])
        ) >
        sum by (namespace, workload) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_workload_resource_request:sum{
                        workload!~"Job:.+", resource="cpu", $1
                    }[1h]
                )[$step:1h]
            )
        )
    )
    or
    (
        sum by (namespace, workload) (
            sum_over_time(avg_over_time(namespace:workload_cpu_usage:sum{$1}[1h])[$step:1h])
        )
    ),
    0.001
)""",
    "meter_workload_memory_usage_wo_cache": """
round(
    (
        sum by (namespace, workload) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_workload_resource_request:sum{
                        workload!~"Job:.+", resource="memory", $1
                    }[1h]
                )[$step:1h]
            )
        ) >=
        sum by (namespace, workload) (
            sum_over_time(avg_over_time(namespace:workload_memory_usage_wo_cache:sum{$1}[1h])[$step:1h])
        )
    )
    or
    (
        sum by (namespace, workload) (
            sum_over_time(avg_over_time(namespace:workload_memory_usage_wo_cache:sum{$1}[1h])[$step:1h])
        ) >
        sum by (namespace, workload) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_workload_resource_request:sum{
                        workload!~"Job:.+", resource="memory", $1
                    }[1h]
                )[$step:1h]
            )
        )
    )
    or
    (
        sum by (namespace, workload) (
            sum_over_time(avg_over_time(namespace:workload_memory_usage_wo_cache:sum{$1}[1h])[$step:1h])
        )
    ),
    1
)""",
    "meter_workload_net_bytes_transmitted": """
round(
    sum_over_time(
        increase(
            namespace:workload_net_bytes_transmitted:sum{$1}[1h]
        )[$step:1h]
    ),
    1
)""",
    "meter_workload_net_bytes_received": """
round(
    sum_over_time(
        increase(
            namespace:workload_net_bytes_received:sum{$1}[1h]
        )[$step:1h]
    ),
    1
)""",
    "meter_workload_pvc_bytes_total": """
sum by (namespace, workload) (
    topk(
        1,
        sum_over_time(avg_over_time(namespace:pvc_bytes_pod:sum{$1}[1h])[$step:1h])
    ) by (persistentvolumeclaim, namespace, workload)
)""",
    # service
    "meter_service_cpu_usage": """
round(
    sum by (namespace, service) (
        label_replace(
            sum by (namespace, pod) (
                sum_over_time(
                    avg_over_time(
                        namespace:kube_pod_resource_request:sum{owner_kind!="Job", resource="cpu", $1}[1h]
                    )[$step:1h]
                )
            ) >=
            sum by (namespace, pod) (
                sum by (namespace, pod) (
                    sum_over_time(
                        irate(
                            container_cpu_usage_seconds_total{job="kubelet", pod!="", image!=""}[1h]
                        )[$step:1h]
                    )
                ) * on (namespace, pod) group_left(owner_kind, owner_name)
                kube_pod_owner{} * on (namespace, pod) group_left(node)
                kube_pod_info{$1}
            ),
            "service",
            "$svc",
            "",
            ""
        )
    )
    or
    sum by (namespace, service) (
        label_replace(
            sum by (namespace, pod) (
                sum by (namespace, pod) (
                    sum_over_time(
                        irate(
                            container_cpu_usage_seconds_total{job="kubelet", pod!="", image!=""}[1h]
                        )[$step:1h]
                    )
                ) * on (namespace, pod) group_left(owner_kind, owner_name)
                kube_pod_owner{} * on (namespace, pod) group_left(node)
                kube_pod_info{$1}
            ) >
            sum by (namespace, pod) (
                sum_over_time(
                    avg_over_time(namespace:kube_pod_resource_request:sum{owner_kind!="Job", resource="cpu", $1}[1h])[$step:1h]
                )
            ),
            "service",
            "$svc",
            "",
            ""
        )
    )
    or
    sum by (namespace, service) (
        label_replace(
            sum by (namespace, pod) (
                sum by (namespace, pod) (
                    sum_over_time(
                        irate(
                            container_cpu_usage_seconds_total{job="kubelet", pod!="", image!=""}[1h]
                        )[$step:1h]
                    )
                ) * on (namespace, pod) group_left(owner_kind, owner_name)
                kube_pod_owner{} * on (namespace, pod) group_left(node)
                kube_pod_info{$1}
            ),
            "service",
            "$svc",
            "",
            ""
        )
    ),
    0.001
)""",
    "meter_service_memory_usage_wo_cache": """
round(
    (
        sum by (namespace, service) (
            label_replace(
                sum by (namespace, pod) (
                    sum_over_time(
                        avg_over_time(
                            namespace:kube_pod_resource_request:sum{owner_kind!="Job", resource="memory", $1}[1h]
                        )[$step:1h]
                    )
                ) >=
                sum by (namespace, pod) (
                    sum by (namespace, pod) (
                        sum_over_time(
                            avg_over_time(
                                container_memory_working_set_bytes{job="kubelet", pod!="", image!=""}[1h]
                            )[$step:1h]
                        )
                    ) * on (namespace, pod) group_left(owner_kind, owner_name)
                    kube_pod_owner{} * on (namespace, pod) group_left(node)
                    kube_pod_info{$1}
                ),
                "service",
                "$svc",
                "",
                ""
            )
        )
    )
    or
    (
        sum by (namespace, service) (
            label_replace(
                sum by (namespace, pod) (
                    sum by (namespace, pod) (
                        sum_over_time(
                            avg_over_time(
                                container_memory_working_set_bytes{job="kubelet", pod!="", image!=""}[1h]
                            )[$step:1h]
                        )
                    ) * on (namespace, pod) group_left(owner_kind, owner_name)
                    kube_pod_owner{} * on (namespace, pod) group_left(node)
                    kube_pod_info{$1}
                ) >
                sum by (namespace, pod) (
                    sum_over_time(
                        avg_over_time(
                            namespace:kube_pod_resource_request:sum{owner_kind!="Job", resource="memory", $1}[1h]
                        )[$step:1h]
                    )
                ),
                "service",
                "$svc",
                "",
                ""
            )
        )
    )
    or
    (
        sum by (namespace, service) (
            label_replace(
                sum by (namespace, pod) (
                    sum by (namespace, pod) (
                        sum_over_time(
                            avg_over_time(
                                container_memory_working_set_bytes{job="kubelet", pod!="", image!=""}[1h]
                            )[$step:1h]
                        )
                    ) * on (namespace, pod) group_left(owner_kind, owner_name)
                    kube_pod_owner{} * on (namespace, pod) group_left(node)
                    kube_pod_info{$1}
                ),
                "service",
                "$svc",
                "",
                ""
            )
        )
    ),
    1
)""",
    "meter_service_net_bytes_transmitted": """
round(
    sum by (namespace, service) (
        label_replace(
            sum by (namespace, pod) (
                sum by (namespace, pod) (
                    sum_over_time(
                        increase(
                            container_network_transmit_bytes_total{
                                pod!="",
                                interface!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)",
                                job="kubelet"
                            }[1h]
                        )[$step:1h]
                    )
                ) * on (namespace, pod) group_left(owner_kind, owner_name)
                kube_pod_owner{} * on (namespace, pod) group_left(node)
                kube_pod_info{$1}
            ),
            "service",
            "$svc",
            "",
            ""
        )
    ),
    1
)""",
    # Known suspect: groups by "namepace", so the namespace label is dropped.
    "meter_service_net_bytes_received": """
round(
    label_replace(
        sum by (namepace, pod) (
            sum by (namespace, pod) (
                sum_over_time(
                    increase(
                        container_network_receive_bytes_total{
                            pod!="",
                            interface!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)",
                            job="kubelet"
                        }[1h]
                    )[$step:1h]
                )
            ) * on (namespace, pod) group_left(owner_kind, owner_name)
            kube_pod_owner{} * on (namespace, pod) group_left(node)
            kube_pod_info{$1}
        ),
        "service",
        "$svc",
        "",
        ""
    ),
    1
)""",
    # pod
    "meter_pod_cpu_usage": """
round(
    (
        sum by (namespace, pod) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job",
                        resource="cpu",
                    }[1h]
                )[$step:1h]
            )
        )
        * on (namespace, pod) group_left(owner_kind, owner_name)
        kube_pod_owner{$1}
        * on (namespace, pod) group_left(node)
        kube_pod_info{$2} >=
        sum by (namespace, pod) (
            sum_over_time(
                irate(container_cpu_usage_seconds_total{job="kubelet",pod!="",image!=""}[1h])[$step:1h]
            )
        )
        * on (namespace, pod) group_left(owner_kind, owner_name)
        kube_pod_owner{$1}
        * on (namespace, pod) group_left(node)
        kube_pod_info{$2}
    )
    or
    (
        sum by (namespace, pod) (
            sum_over_time(irate(container_cpu_usage_seconds_total{job="kubelet",pod!="",image!=""}[1h])[$step:1h])
        )
        * on (namespace, pod) group_left(owner_kind, owner_name)
        kube_pod_owner{$1}
        * on (namespace, pod) group_left(node)
        kube_pod_info{$2} >
        sum by (namespace, pod) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job",
                        resource="cpu",
                    }[1h]
                )[$step:1h]
            )
        )
        * on (namespace, pod) group_left(owner_kind, owner_name)
        kube_pod_owner{$1}
        * on (namespace, pod) group_left(node)
        kube_pod_info{$2}
    )
    or
    (
        sum by (namespace, pod) (
            sum_over_time(irate(container_cpu_usage_seconds_total{job="kubelet",pod!="",image!=""}[1h])[$step:1h])
        )
        * on (namespace, pod) group_left(owner_kind, owner_name)
        kube_pod_owner{$1}
        * on (namespace, pod) group_left(node)
        kube_pod_info{$2}
    ),
    0.001
)""",
    "meter_pod_memory_usage_wo_cache": """
round(
    (
        sum by (namespace, pod) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job",
                        resource="memory",
                    }[1h]
                )[$step:1h]
            )
        )
        * on (namespace, pod) group_left(owner_kind, owner_name)
        kube_pod_owner{$1}
        * on (namespace, pod) group_left(node)
        kube_pod_info{$2} >=
        sum by (namespace, pod) (
            sum_over_time(
                avg_over_time(container_memory_working_set_bytes{job="kubelet", pod!="", image!=""}[1h])[$step:1h]
            )
        )
        * on (namespace, pod) group_left(owner_kind, owner_name)
        kube_pod_owner{$1}
        * on (namespace, pod) group_left(node)
        kube_pod_info{$2}
    )
    or
    (
        sum by (namespace, pod) (
            sum_over_time(
                avg_over_time(container_memory_working_set_bytes{job="kubelet", pod!="", image!=""}[1h])[$step:1h])
            )
            * on (namespace, pod) group_left(owner_kind, owner_name)
            kube_pod_owner{$1}
            * on (namespace, pod) group_left(node)
            kube_pod_info{$2} >
        sum by (namespace, pod) (
            sum_over_time(
                avg_over_time(
                    namespace:kube_pod_resource_request:sum{
                        owner_kind!="Job",
                        resource="memory",
                    }[1h]
                )[$step:1h]
            )
            * on (namespace, pod) group_left(owner_kind, owner_name)
            kube_pod_owner{$1}
            * on (namespace, pod) group_left(node)
            kube_pod_info{$2}
        )
    )
    or
    (
        sum by (namespace, pod) (
            sum_over_time(avg_over_time(container_memory_working_set_bytes{job="kubelet", pod!="", image!=""}[1h])[$step:1h])
        )
        * on (namespace, pod) group_left(owner_kind, owner_name)
        kube_pod_owner{$1}
        * on (namespace, pod) group_left(node)
        kube_pod_info{$2}
    ),
    0.001
)""",
    "meter_pod_net_bytes_transmitted": """
sum by (namespace, pod) (
    sum_over_time(
        increase(
            container_network_transmit_bytes_total{
                pod!="", interface!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)", job="kubelet"
            }[1h]
        )[$step:1h]
    )
)
* on (namespace, pod) group_left(owner_kind, owner_name) kube_pod_owner{$1}
* on (namespace, pod) group_left(node) kube_pod_info{$2}""",
    "meter_pod_net_bytes_received": """
sum by (namespace, pod) (
    sum_over_time(
        increase(
            container_network_receive_bytes_total{
                pod!="", interface!~"^(cali.+|tunl.+|dummy.+|kube.+|flannel.+|cni.+|docker.+|veth.+|lo.*)", job="kubelet"
            }[1h]
        )[$step:1h]
    )
)
* on (namespace, pod) group_left(owner_kind, owner_name) kube_pod_owner{$1}
* on (namespace, pod) group_left(node) kube_pod_info{$2}""",
    "meter_pod_pvc_bytes_total": """
sum by (namespace, pod) (
    sum_over_time(avg_over_time(namespace:pvc_bytes_pod:sum{}[1h])[$step:1h])
)
* on (namespace, pod) group_left(owner_kind, owner_name) kube_pod_owner{$1}
* on (namespace, pod) group_left(node) kube_pod_info{$2}""",
}

METER_TEMPLATES = MappingProxyType(_METER_TEMPLATES)
