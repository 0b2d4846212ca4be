# tests/core/test_config.py
"""
Tests for the Config class.
"""

import logging
import os
from unittest.mock import patch

import pytest

from kubemeter.core.config import Config


class TestGetSecret:
    """Tests for the Config._get_secret method."""

    def test_get_secret_from_env_var(self):
        with patch.dict(os.environ, {"TEST_SECRET": "env_value"}):
            assert Config._get_secret("TEST_SECRET") == "env_value"

    def test_get_secret_with_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Config._get_secret("NONEXISTENT_SECRET", default="default_value") == "default_value"

    def test_get_secret_from_file(self):
        with patch("kubemeter.core.config.os.path.exists") as mock_exists:
            mock_exists.return_value = True
            with patch("builtins.open", create=True) as mock_open:
                mock_open.return_value.__enter__.return_value.read.return_value = "file_value\n"
                assert Config._get_secret("TEST_SECRET") == "file_value"
                mock_open.assert_called_once_with("/etc/kubemeter/secrets/TEST_SECRET", "r")

    def test_get_secret_permission_error(self):
        with patch("kubemeter.core.config.os.path.exists") as mock_exists:
            mock_exists.return_value = True
            with patch("builtins.open", side_effect=PermissionError("denied")):
                with pytest.raises(PermissionError) as exc_info:
                    Config._get_secret("TEST_SECRET")
                assert "permission denied" in str(exc_info.value)


def test_credentials_are_loaded_from_env(monkeypatch):
    monkeypatch.setenv("PROMETHEUS_BEARER_TOKEN", "token-123")
    monkeypatch.setenv("PROMETHEUS_USERNAME", "admin")
    monkeypatch.setenv("PROMETHEUS_PASSWORD", "secret")
    cfg = Config()
    assert cfg.PROMETHEUS_BEARER_TOKEN == "token-123"
    assert cfg.PROMETHEUS_USERNAME == "admin"
    assert cfg.PROMETHEUS_PASSWORD == "secret"


def test_monitoring_backend_is_read_at_access_time(monkeypatch):
    cfg = Config()
    assert cfg.MONITORING_BACKEND == "prometheus"
    monkeypatch.setenv("MONITORING_BACKEND", "VictoriaMetrics")
    assert cfg.MONITORING_BACKEND == "victoriametrics"


def test_validate_warns_on_unknown_backend(monkeypatch, caplog):
    monkeypatch.setenv("MONITORING_BACKEND", "influxdb")
    with caplog.at_level(logging.WARNING):
        Config().validate_instance()
    assert "influxdb" in caplog.text


def test_validate_rejects_non_positive_limits():
    cfg = Config()
    cfg.METER_MIN_COARSE_STEP_HOURS = 0
    with pytest.raises(ValueError):
        cfg.validate_instance()
