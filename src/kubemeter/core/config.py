# src/kubemeter/core/config.py

import logging
import os

from dotenv import load_dotenv

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "t", "y", "yes")


class Config:
    """
    Handles the application's configuration by loading values from environment variables.
    """

    def __init__(self):
        # -- Prometheus credentials ---
        self.PROMETHEUS_BEARER_TOKEN = self._get_secret("PROMETHEUS_BEARER_TOKEN")
        self.PROMETHEUS_USERNAME = self._get_secret("PROMETHEUS_USERNAME")
        self.PROMETHEUS_PASSWORD = self._get_secret("PROMETHEUS_PASSWORD")

    @staticmethod
    def _get_secret(key: str, default: str = None) -> str:
        """
        Retrieves a secret from a file (Docker secret/volume) or falls back to environment variable.

        Raises:
            PermissionError: If the secret file exists but cannot be read due to permissions.
            IOError: If the secret file exists but cannot be read due to I/O errors.
        """
        secret_file = f"/etc/kubemeter/secrets/{key}"
        if os.path.exists(secret_file):
            try:
                with open(secret_file, "r") as f:
                    value = f.read().strip()
                    logging.getLogger(__name__).debug(f"Loaded secret '{key}' from {secret_file}")
                    return value
            except PermissionError as e:
                raise PermissionError(
                    f"Secret file '{secret_file}' exists but cannot be read due to permission denied. "
                    f"Please check file permissions or run with appropriate privileges."
                ) from e
            except (IOError, OSError) as e:
                raise IOError(
                    f"Secret file '{secret_file}' exists but cannot be read: {e}. "
                    f"Please check the file integrity and system resources."
                ) from e
        return os.getenv(key, default)

    # The backend key is resolved at access time so tests and callers can
    # switch backends through the environment after import.
    @property
    def MONITORING_BACKEND(self) -> str:
        return os.getenv("MONITORING_BACKEND", "prometheus").lower()

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # -- Prometheus variables ---
    PROMETHEUS_URL = os.getenv("PROMETHEUS_URL", "http://localhost:9090")
    PROMETHEUS_VERIFY_CERTS = _as_bool(os.getenv("PROMETHEUS_VERIFY_CERTS", "True"))
    PROMETHEUS_TIMEOUT = float(os.getenv("PROMETHEUS_TIMEOUT", "10"))

    # --- Metering time-window limits ---
    # Ranges longer than METER_MAX_FINE_RANGE_DAYS need a step of at least
    # METER_MIN_COARSE_STEP_HOURS.
    METER_MAX_FINE_RANGE_DAYS = int(os.getenv("METER_MAX_FINE_RANGE_DAYS", "30"))
    METER_MIN_COARSE_STEP_HOURS = int(os.getenv("METER_MIN_COARSE_STEP_HOURS", "24"))

    def validate_instance(self):
        from ..expressions.namespace import NAMESPACE_SCOPERS

        if self.MONITORING_BACKEND not in NAMESPACE_SCOPERS:
            logging.warning(
                "MONITORING_BACKEND '%s' has no namespace scoper; ad-hoc queries will fail.",
                self.MONITORING_BACKEND,
            )
        if self.METER_MAX_FINE_RANGE_DAYS <= 0:
            raise ValueError("METER_MAX_FINE_RANGE_DAYS must be a positive number of days.")
        if self.METER_MIN_COARSE_STEP_HOURS <= 0:
            raise ValueError("METER_MIN_COARSE_STEP_HOURS must be a positive number of hours.")
        if self.PROMETHEUS_TIMEOUT <= 0:
            raise ValueError("PROMETHEUS_TIMEOUT must be a positive number of seconds.")


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
