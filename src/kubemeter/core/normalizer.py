# src/kubemeter/core/normalizer.py
"""
Validation and alignment of (start, end, step) for ranged metering queries,
and the per-meter scaling factors derived from the step.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, NamedTuple

from ..data.meter_resources import METER_RESOURCE_MAP
from .config import config
from .exceptions import StepNotIntegerHoursError, StepTooSmallForRangeError

logger = logging.getLogger(__name__)

ONE_HOUR = timedelta(hours=1)


class TimeWindow(NamedTuple):
    start: datetime
    end: datetime
    step: timedelta

    @property
    def step_hours(self) -> float:
        return self.step.total_seconds() / 3600


def normalize_time_window(
    start: datetime,
    end: datetime,
    step: timedelta,
    max_fine_range: timedelta = None,
    min_coarse_step: timedelta = None,
) -> TimeWindow:
    """
    Normalizes a metering window.

    Rules, applied in order:
    1. A step below one hour is raised to one hour (warning only).
    2. A range longer than max_fine_range needs a step of at least
       min_coarse_step.
    3. The step must be a whole number of hours.
    4. The window is (start, end]: start is advanced by one step, or moved
       to end when that would overshoot it.

    Raises:
        StepTooSmallForRangeError: If rule 2 is violated.
        StepNotIntegerHoursError: If rule 3 is violated.
    """
    if max_fine_range is None:
        max_fine_range = timedelta(days=config.METER_MAX_FINE_RANGE_DAYS)
    if min_coarse_step is None:
        min_coarse_step = timedelta(hours=config.METER_MIN_COARSE_STEP_HOURS)

    if step < ONE_HOUR:
        logger.warning("step %s should be longer than one hour; using 1h", step)
        step = ONE_HOUR

    if end - start > max_fine_range and step < min_coarse_step:
        raise StepTooSmallForRangeError(
            f"step should be at least {min_coarse_step} for ranges longer than {max_fine_range}"
        )

    if step % ONE_HOUR:
        raise StepNotIntegerHoursError(f"step should be integer hours, got {step}")

    # query time range is (start, end], so the start sample itself is excluded
    if start + step > end:
        start = end
    else:
        start = start + step

    return TimeWindow(start=start, end=end, step=step)


def generate_scaling_factor_map(step: timedelta) -> Dict[str, float]:
    """Maps every usage meter to the number of hours in one step."""
    hours = step.total_seconds() / 3600
    return {meter: hours for meter in METER_RESOURCE_MAP}
