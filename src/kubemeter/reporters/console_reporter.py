# src/kubemeter/reporters/console_reporter.py
"""
A reporter that displays evaluated meters in a formatted table in the console.
"""

import logging
from typing import Dict, Optional

from rich.console import Console
from rich.table import Table

from ..models.monitoring import Metrics
from .base_reporter import BaseReporter

logger = logging.getLogger(__name__)


def _format_labels(metadata: Dict[str, str]) -> str:
    if not metadata:
        return "{}"
    return ", ".join(f'{k}="{v}"' for k, v in sorted(metadata.items()))


def _format_value(value: Optional[float]) -> str:
    return "" if value is None else f"{value:.4f}"


class ConsoleReporter(BaseReporter):
    """
    Renders meter results to the console using the 'rich' library.
    """

    def __init__(self):
        self.console = Console()

    def report(self, metrics: Metrics):
        """
        Displays one row per series, and one row per failed meter.
        """
        if not metrics.results:
            self.console.print("No data to report.", style="yellow")
            return

        table = Table(
            title="kubemeter Usage Report",
            header_style="bold magenta",
            show_lines=True,
        )
        table.add_column("Meter", style="cyan")
        table.add_column("Labels", style="cyan")
        table.add_column("Min", style="green", justify="right")
        table.add_column("Max", style="green", justify="right")
        table.add_column("Avg", style="green", justify="right")
        table.add_column("Sum", style="green", justify="right")
        table.add_column("Unit", style="dim")
        table.add_column("Error", style="red")

        for metric in metrics.results:
            if metric.error:
                table.add_row(metric.metric_name, "", "", "", "", "", "", metric.error)
                continue

            values = metric.metric_data.metric_values
            if not values:
                table.add_row(metric.metric_name, "", "", "", "", "", "", "no data")
                continue

            for value in values:
                table.add_row(
                    metric.metric_name,
                    _format_labels(value.metadata),
                    _format_value(value.min_value),
                    _format_value(value.max_value),
                    _format_value(value.avg_value),
                    _format_value(value.sum_value),
                    value.resource_unit or "",
                    "",
                )

        self.console.print(table)
