# src/kubemeter/expressions/compiler.py
"""
Compiles a meter identifier and query options into a PromQL expression.
"""

import logging
import re
from typing import Optional

from ..core.exceptions import MissingMeterOptionsError, UnknownMetricError, UsageError
from ..models.monitoring import QueryOptions
from .placeholders import replace_positional, unsupported_placeholders
from .registry import TemplateRegistry, default_registry
from .renderer import render_meter_template
from .selectors import LEVEL_BUILDERS

logger = logging.getLogger(__name__)

# An empty selector at the head of a matcher list leaves "{, ..." behind.
_LEADING_COMMA_RE = re.compile(r"\{\s*,\s*")


class MeterExpressionCompiler:
    """
    Stateless compiler over a read-only TemplateRegistry. Safe to share
    between threads.
    """

    def __init__(self, registry: Optional[TemplateRegistry] = None):
        self.registry = registry or default_registry()

    def compile_strict(self, meter: str, options: QueryOptions) -> str:
        """
        Compiles a meter expression.

        Raises:
            UnknownMetricError: If the meter is not registered.
            MissingMeterOptionsError: If options.meter_options is not set.
        """
        tmpl = self.registry.lookup(meter)
        if tmpl is None:
            raise UnknownMetricError(meter)
        if options.meter_options is None:
            raise MissingMeterOptionsError(f"meter options not found for {meter}")

        unsupported = unsupported_placeholders(tmpl, options.level)
        if unsupported:
            logger.warning(
                "Meter %s uses %s which level '%s' does not supply; rendering them empty",
                meter,
                ", ".join(sorted(p.value for p in unsupported)),
                options.level.value,
            )

        expr = render_meter_template(tmpl, options)
        expr = LEVEL_BUILDERS[options.level](meter, expr, options)
        # slots the level builder left alone mean "no filter"
        expr = replace_positional(expr)
        expr = _LEADING_COMMA_RE.sub("{", expr)

        logger.debug("Compiled meter %s at level %s: %s", meter, options.level.value, expr)
        return expr

    def compile(self, meter: str, options: QueryOptions) -> str:
        """
        Lenient variant of compile_strict(): usage errors are logged and an
        empty expression is returned so sibling meters in a batch proceed.
        """
        try:
            return self.compile_strict(meter, options)
        except UsageError as e:
            logger.error("Failed to compile meter %s: %s", meter, e)
            return ""
