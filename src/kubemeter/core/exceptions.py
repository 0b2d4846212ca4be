class KubeMeterError(Exception):
    """Base exception for kubemeter."""

    pass


class UsageError(KubeMeterError):
    """Raised when the caller asks for something that can never succeed."""

    pass


class MissingMeterOptionsError(UsageError):
    """Raised when a metering expression is compiled without meter options."""

    pass


class UnknownMetricError(UsageError):
    """Raised when a metric identifier has no registered template."""

    def __init__(self, metric: str):
        super().__init__(f"invalid meter {metric}")
        self.metric = metric


class UnsupportedBackendError(UsageError):
    """Raised when no namespace scoper or client is registered for a backend key."""

    def __init__(self, backend: str):
        super().__init__(f"monitoring backend '{backend}' is not supported")
        self.backend = backend


class MeterValidationError(KubeMeterError, ValueError):
    """Base exception for invalid metering time windows."""

    pass


class StepTooSmallForRangeError(MeterValidationError):
    """Raised when a long range is requested with a sub-day step."""

    pass


class StepNotIntegerHoursError(MeterValidationError):
    """Raised when the step is not a whole number of hours."""

    pass


class BackendError(KubeMeterError):
    """Raised when the metrics backend cannot evaluate an expression."""

    pass


class ExpressionError(KubeMeterError):
    """Raised when an ad-hoc expression cannot be tokenized."""

    pass
