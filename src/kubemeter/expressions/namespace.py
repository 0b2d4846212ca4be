# src/kubemeter/expressions/namespace.py
"""
Namespace isolation for ad-hoc expressions.

Every monitoring backend enforces tenant isolation differently, so the
operator is given a NamespaceScoper at construction time. The Prometheus
scoper rewrites every vector selector of a PromQL expression so that it
carries exactly one `namespace="<ns>"` matcher, dropping any namespace
matcher the caller wrote.
"""

import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import List, Tuple

from ..core.exceptions import ExpressionError, UnsupportedBackendError

logger = logging.getLogger(__name__)

# Identifiers that are never metric names when they are not followed by "(".
_KEYWORDS = frozenset(
    {
        "and",
        "or",
        "unless",
        "bool",
        "offset",
        "by",
        "without",
        "on",
        "ignoring",
        "group_left",
        "group_right",
        "inf",
        "nan",
        "atan2",
    }
)

# Keywords whose parenthesised argument is a label list, not an expression.
_LABEL_LIST_KEYWORDS = frozenset({"by", "without", "on", "ignoring", "group_left", "group_right"})

_IDENT_START = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_:"
_IDENT_CHARS = _IDENT_START + "0123456789"
_QUOTES = "\"'`"


class NamespaceScoper(ABC):
    """
    Rewrites an expression so that it only selects series of one namespace.
    """

    @abstractmethod
    def scope(self, expr: str, namespace: str) -> str:
        """
        Returns the namespace-scoped expression.

        Raises:
            ExpressionError: If the expression cannot be tokenized.
        """
        pass


class PrometheusNamespaceScoper(NamespaceScoper):
    """
    Enforces a namespace matcher on every PromQL vector selector.

    An empty namespace means cluster scope; the expression is still checked
    but returned unchanged.
    """

    def scope(self, expr: str, namespace: str) -> str:
        rewritten = self._rewrite(expr, namespace)
        return rewritten if namespace else expr

    def _rewrite(self, expr: str, namespace: str) -> str:
        out: List[str] = []
        i = 0
        n = len(expr)
        while i < n:
            c = expr[i]
            if c in _QUOTES:
                end = _skip_string(expr, i)
                out.append(expr[i:end])
                i = end
            elif c == "#":
                end = expr.find("\n", i)
                end = n if end == -1 else end
                out.append(expr[i:end])
                i = end
            elif c == "[":
                end = expr.find("]", i)
                if end == -1:
                    raise ExpressionError(f"unclosed '[' at position {i}")
                out.append(expr[i : end + 1])
                i = end + 1
            elif c == "{":
                matchers, i = _read_matchers(expr, i)
                out.append(_format_matchers(matchers, namespace))
            elif c in "}]":
                raise ExpressionError(f"unexpected '{c}' at position {i}")
            elif c.isdigit() or (c == "." and i + 1 < n and expr[i + 1].isdigit()):
                end = i
                while end < n and (expr[end].isalnum() or expr[end] in "._"):
                    end += 1
                out.append(expr[i:end])
                i = end
            elif c in _IDENT_START:
                end = i
                while end < n and expr[end] in _IDENT_CHARS:
                    end += 1
                ident = expr[i:end]
                out.append(ident)
                i = end
                nxt = _next_non_space(expr, i)
                lowered = ident.lower()
                if lowered in _LABEL_LIST_KEYWORDS and nxt < n and expr[nxt] == "(":
                    close = expr.find(")", nxt)
                    if close == -1:
                        raise ExpressionError(f"unclosed label list after '{ident}'")
                    out.append(expr[i : close + 1])
                    i = close + 1
                elif lowered in _KEYWORDS or (nxt < n and expr[nxt] == "("):
                    continue
                elif _word_at(expr, nxt).lower() in ("by", "without"):
                    # aggregation operator with a leading grouping clause
                    continue
                elif nxt < n and expr[nxt] == "{":
                    out.append(expr[i:nxt])
                    matchers, i = _read_matchers(expr, nxt)
                    out.append(_format_matchers(matchers, namespace))
                else:
                    out.append(_format_matchers([], namespace))
            else:
                out.append(c)
                i += 1
        return "".join(out)


def _skip_string(expr: str, start: int) -> int:
    quote = expr[start]
    i = start + 1
    while i < len(expr):
        if expr[i] == "\\" and quote != "`":
            i += 2
            continue
        if expr[i] == quote:
            return i + 1
        i += 1
    raise ExpressionError(f"unterminated string starting at position {start}")


def _next_non_space(expr: str, i: int) -> int:
    while i < len(expr) and expr[i].isspace():
        i += 1
    return i


def _word_at(expr: str, i: int) -> str:
    end = i
    while end < len(expr) and expr[end] in _IDENT_CHARS:
        end += 1
    return expr[i:end]


def _read_matchers(expr: str, start: int) -> Tuple[List[str], int]:
    """Splits the matcher list opened at `start` into its comma-separated items."""
    items: List[str] = []
    current: List[str] = []
    i = start + 1
    while i < len(expr):
        c = expr[i]
        if c in _QUOTES:
            end = _skip_string(expr, i)
            current.append(expr[i:end])
            i = end
            continue
        if c == "}":
            items.append("".join(current).strip())
            return [item for item in items if item], i + 1
        if c == "{":
            raise ExpressionError(f"nested '{{' at position {i}")
        if c == ",":
            items.append("".join(current).strip())
            current = []
        else:
            current.append(c)
        i += 1
    raise ExpressionError(f"unclosed '{{' at position {start}")


def _label_name(matcher: str) -> str:
    for idx, c in enumerate(matcher):
        if c in "=!~":
            return matcher[:idx].strip()
    return matcher.strip()


def _format_matchers(matchers: List[str], namespace: str) -> str:
    kept = [m for m in matchers if _label_name(m) != "namespace"]
    value = namespace.replace("\\", "\\\\").replace('"', '\\"')
    kept.append(f'namespace="{value}"')
    return "{" + ", ".join(kept) + "}"


NAMESPACE_SCOPERS = MappingProxyType(
    {
        "prometheus": PrometheusNamespaceScoper,
    }
)


def get_namespace_scoper(backend: str) -> NamespaceScoper:
    """
    Returns the scoper registered for a backend key.

    Raises:
        UnsupportedBackendError: If no scoper is registered for the key.
    """
    scoper_cls = NAMESPACE_SCOPERS.get((backend or "").lower())
    if scoper_cls is None:
        raise UnsupportedBackendError(backend)
    return scoper_cls()
