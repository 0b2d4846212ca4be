# src/kubemeter/expressions/placeholders.py
"""
The closed set of placeholders a meter template may contain, and which of
them each level is able to supply.

Named placeholders ($step, $pvc, ...) are recognized anywhere in a template.
Positional filter slots ($1, $2) are only recognized inside `{...}` label
matchers, since a `"$1"` argument of label_replace is a capture reference.
"""

import re
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet

from ..models.monitoring import Level


class Placeholder(str, Enum):
    STEP = "$step"
    NODE_SELECTOR = "$nodeSelector"
    INSTANCE_SELECTOR = "$instanceSelector"
    PVC = "$pvc"
    APP = "$app"
    SVC = "$svc"
    FILTER_1 = "$1"
    FILTER_2 = "$2"


NAMED_PLACEHOLDERS = (
    Placeholder.STEP,
    Placeholder.NODE_SELECTOR,
    Placeholder.INSTANCE_SELECTOR,
    Placeholder.PVC,
    Placeholder.APP,
    Placeholder.SVC,
)

POSITIONAL_PLACEHOLDERS = (Placeholder.FILTER_1, Placeholder.FILTER_2)

_NAMED_RE = re.compile(r"\$(step|nodeSelector|instanceSelector|pvc|app|svc)(?![A-Za-z0-9_])")
_MATCHERS_RE = re.compile(r"\{[^{}]*\}")
_POSITIONAL_RE = re.compile(r"\$([12])(?![0-9])")

LEVEL_PLACEHOLDERS = MappingProxyType(
    {
        Level.CLUSTER: frozenset({Placeholder.STEP}),
        Level.NODE: frozenset(
            {Placeholder.STEP, Placeholder.NODE_SELECTOR, Placeholder.INSTANCE_SELECTOR, Placeholder.PVC}
        ),
        Level.WORKSPACE: frozenset({Placeholder.STEP, Placeholder.PVC, Placeholder.FILTER_1}),
        Level.NAMESPACE: frozenset({Placeholder.STEP, Placeholder.PVC, Placeholder.FILTER_1}),
        Level.APPLICATION: frozenset({Placeholder.STEP, Placeholder.PVC, Placeholder.APP, Placeholder.FILTER_1}),
        Level.WORKLOAD: frozenset({Placeholder.STEP, Placeholder.FILTER_1}),
        Level.SERVICE: frozenset({Placeholder.STEP, Placeholder.SVC, Placeholder.FILTER_1}),
        Level.POD: frozenset({Placeholder.STEP, Placeholder.FILTER_1, Placeholder.FILTER_2}),
    }
)


def find_placeholders(text: str) -> FrozenSet[Placeholder]:
    """Returns every placeholder occurring in a template or expression."""
    found = {Placeholder("$" + m.group(1)) for m in _NAMED_RE.finditer(text)}
    for block in _MATCHERS_RE.finditer(text):
        found.update(Placeholder("$" + m.group(1)) for m in _POSITIONAL_RE.finditer(block.group(0)))
    return frozenset(found)


def unsupported_placeholders(template: str, level: Level) -> FrozenSet[Placeholder]:
    """Placeholders present in the template that the level never fills."""
    return find_placeholders(template) - LEVEL_PLACEHOLDERS[level]


def residual_placeholders(expression: str) -> FrozenSet[Placeholder]:
    """Placeholders left in a compiled expression. Empty on success."""
    return find_placeholders(expression)


def replace_named(text: str, placeholder: Placeholder, value: str) -> str:
    """Replaces a named placeholder without touching longer tokens sharing its prefix."""
    pattern = re.escape(placeholder.value) + r"(?![A-Za-z0-9_])"
    return re.sub(pattern, lambda _: value, text)


def replace_positional(text: str, first: str = "", second: str = "") -> str:
    """Fills the $1/$2 slots found inside label matchers."""
    values = {"1": first, "2": second}

    def _fill(block):
        return _POSITIONAL_RE.sub(lambda m: values[m.group(1)], block.group(0))

    return _MATCHERS_RE.sub(_fill, text)
