# src/kubemeter/expressions/registry.py
"""
Read-only registry of meter templates.

The registry is built once and shared by every compiler. It never mutates
after construction, so concurrent callers need no locking.
"""

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import FrozenSet, Iterator, List, Mapping, Optional

from ..core.exceptions import UnknownMetricError
from ..data.meter_templates import METER_TEMPLATES
from ..models.monitoring import Level
from .placeholders import Placeholder, find_placeholders

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """
    Immutable mapping from metric identifier to raw template text.
    """

    def __init__(self, templates: Mapping[str, str]):
        self._templates = MappingProxyType(dict(templates))

    def __contains__(self, metric: object) -> bool:
        return metric in self._templates

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def lookup(self, metric: str) -> Optional[str]:
        """
        Returns the template for a metric, or None when it is not registered.
        A miss is logged rather than raised so that one bad identifier does
        not abort a batch.
        """
        tmpl = self._templates.get(metric)
        if tmpl is None:
            logger.error("invalid meter %s", metric)
        return tmpl

    def get(self, metric: str) -> str:
        """Like lookup() but raises UnknownMetricError on a miss."""
        tmpl = self._templates.get(metric)
        if tmpl is None:
            raise UnknownMetricError(metric)
        return tmpl

    def placeholders(self, metric: str) -> FrozenSet[Placeholder]:
        return find_placeholders(self.get(metric))

    def meters_for_level(self, level: Level) -> List[str]:
        """Identifiers of the meters defined for a level, in registration order."""
        prefix = f"meter_{level.value}_"
        return [name for name in self._templates if name.startswith(prefix)]


@lru_cache(maxsize=1)
def default_registry() -> TemplateRegistry:
    """
    The registry of built-in meter templates.
    Uses lru_cache to act as a singleton.
    """
    return TemplateRegistry(METER_TEMPLATES)
