# src/kubemeter/expressions/renderer.py
"""
Scope-independent placeholder substitution.

Rendering is a pure function of (template, options): whitespace is collapsed
first, then $step, $pvc, $nodeSelector, $instanceSelector, $app and $svc are
replaced in that order. A placeholder with no value at the current level is
replaced by the empty string.
"""

import logging
import re
from datetime import timedelta

from ..core.exceptions import MissingMeterOptionsError
from ..models.monitoring import QueryOptions
from .placeholders import Placeholder, replace_named
from .selectors import identity_or_regex, replace_pvc_selector

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(tmpl: str) -> str:
    return _WHITESPACE_RE.sub(" ", tmpl).strip()


def format_step(step: timedelta) -> str:
    """Whole hours of the step with an "h" suffix. Sub-hour remainders are truncated."""
    return f"{int(step.total_seconds() // 3600)}h"


def replace_step_selector(tmpl: str, o: QueryOptions) -> str:
    return replace_named(tmpl, Placeholder.STEP, format_step(o.meter_options.step))


def replace_node_selector(tmpl: str, o: QueryOptions) -> str:
    return replace_named(tmpl, Placeholder.NODE_SELECTOR, identity_or_regex("node", o.node_name, o.resource_filter))


def replace_instance_selector(tmpl: str, o: QueryOptions) -> str:
    # network interfaces are labelled by instance, which carries the node name
    selector = identity_or_regex("instance", o.node_name, o.resource_filter)
    return replace_named(tmpl, Placeholder.INSTANCE_SELECTOR, selector)


def replace_app_selector(tmpl: str, o: QueryOptions) -> str:
    return replace_named(tmpl, Placeholder.APP, o.application_name)


def replace_svc_selector(tmpl: str, o: QueryOptions) -> str:
    return replace_named(tmpl, Placeholder.SVC, o.service_name)


def render_meter_template(tmpl: str, o: QueryOptions) -> str:
    """
    Renders the scope-independent placeholders of a raw template.

    Raises:
        MissingMeterOptionsError: If the options carry no meter options.
    """
    if o.meter_options is None:
        raise MissingMeterOptionsError("meter options not found")

    tmpl = collapse_whitespace(tmpl)
    tmpl = replace_step_selector(tmpl, o)
    tmpl = replace_pvc_selector(tmpl, o)
    tmpl = replace_node_selector(tmpl, o)
    tmpl = replace_instance_selector(tmpl, o)
    tmpl = replace_app_selector(tmpl, o)
    tmpl = replace_svc_selector(tmpl, o)
    return tmpl
