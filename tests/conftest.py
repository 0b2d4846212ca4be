# tests/conftest.py

from datetime import datetime, timedelta, timezone

import pytest

from kubemeter.models.monitoring import Level, MeterOptions, QueryOptions


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Pytest fixture to mock environment variables for the config module.

    This fixture runs automatically for every test (`autouse=True`). It uses
    monkeypatch to set environment variables, ensuring that the application's
    config is predictable and isolated from the actual environment.
    """
    monkeypatch.setenv("PROMETHEUS_URL", "http://prometheus:9090")
    monkeypatch.setenv("MONITORING_BACKEND", "prometheus")


@pytest.fixture
def meter_options():
    return MeterOptions(step=timedelta(hours=1))


@pytest.fixture
def make_options(meter_options):
    """
    Factory fixture building QueryOptions with hourly meter options.
    """

    def _make(level: Level, **kwargs) -> QueryOptions:
        kwargs.setdefault("meter_options", meter_options)
        return QueryOptions(level=level, **kwargs)

    return _make


@pytest.fixture
def window_start():
    return datetime(2024, 3, 1, 0, 0, tzinfo=timezone.utc)
