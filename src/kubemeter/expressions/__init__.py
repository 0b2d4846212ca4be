# src/kubemeter/expressions/__init__.py
"""
PromQL expression compilation for metering meters and namespace isolation
for ad-hoc expressions.
"""

from .compiler import MeterExpressionCompiler
from .namespace import NamespaceScoper, PrometheusNamespaceScoper, get_namespace_scoper
from .registry import TemplateRegistry, default_registry

__all__ = [
    "MeterExpressionCompiler",
    "NamespaceScoper",
    "PrometheusNamespaceScoper",
    "TemplateRegistry",
    "default_registry",
    "get_namespace_scoper",
]
