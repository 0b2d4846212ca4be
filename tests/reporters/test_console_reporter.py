# tests/reporters/test_console_reporter.py
"""
Unit tests for the ConsoleReporter class.
"""

from unittest.mock import MagicMock, call

from kubemeter.models.monitoring import Metric, MetricData, MetricType, MetricValue, Metrics, Point
from kubemeter.reporters.console_reporter import ConsoleReporter


def _metrics():
    return Metrics(
        results=[
            Metric(
                metric_name="meter_namespace_cpu_usage",
                metric_data=MetricData(
                    metric_type=MetricType.VECTOR,
                    metric_values=[
                        MetricValue(
                            metadata={"namespace": "shop"},
                            sample=Point(timestamp=1700000000, value=1.5),
                            min_value=1.5,
                            max_value=1.5,
                            avg_value=1.5,
                            sum_value=1.5,
                            resource_unit="cores",
                        )
                    ],
                ),
            ),
            Metric(metric_name="meter_namespace_gpu_usage", error="invalid meter meter_namespace_gpu_usage"),
        ]
    )


def test_console_reporter_with_data(mocker):
    mock_console_class = mocker.patch("kubemeter.reporters.console_reporter.Console")
    mock_table_class = mocker.patch("kubemeter.reporters.console_reporter.Table")
    mock_console_instance = MagicMock()
    mock_table_instance = MagicMock()
    mock_console_class.return_value = mock_console_instance
    mock_table_class.return_value = mock_table_instance

    ConsoleReporter().report(_metrics())

    assert mock_table_class.call_args.kwargs.get("title") == "kubemeter Usage Report"
    assert mock_table_instance.add_column.call_count == 8
    assert mock_table_instance.add_row.call_args_list == [
        call(
            "meter_namespace_cpu_usage",
            'namespace="shop"',
            "1.5000",
            "1.5000",
            "1.5000",
            "1.5000",
            "cores",
            "",
        ),
        call("meter_namespace_gpu_usage", "", "", "", "", "", "", "invalid meter meter_namespace_gpu_usage"),
    ]
    mock_console_instance.print.assert_called_once_with(mock_table_instance)


def test_console_reporter_no_data(mocker):
    mock_console_class = mocker.patch("kubemeter.reporters.console_reporter.Console")
    mock_console_instance = MagicMock()
    mock_console_class.return_value = mock_console_instance

    ConsoleReporter().report(Metrics())

    mock_console_instance.print.assert_called_once_with("No data to report.", style="yellow")
