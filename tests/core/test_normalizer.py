# tests/core/test_normalizer.py
"""
Tests for time-window normalization and step scaling factors.
"""

import logging
from datetime import timedelta

import pytest

from kubemeter.core.exceptions import MeterValidationError, StepNotIntegerHoursError, StepTooSmallForRangeError
from kubemeter.core.normalizer import ONE_HOUR, generate_scaling_factor_map, normalize_time_window
from kubemeter.data.meter_resources import METER_RESOURCE_MAP


def test_sub_hour_step_is_raised_to_one_hour(window_start, caplog):
    end = window_start + timedelta(hours=5)
    with caplog.at_level(logging.WARNING):
        window = normalize_time_window(window_start, end, timedelta(minutes=30))
    assert window.step == ONE_HOUR
    assert "should be longer than one hour" in caplog.text


def test_start_is_advanced_by_one_step(window_start):
    end = window_start + timedelta(hours=3)
    window = normalize_time_window(window_start, end, ONE_HOUR)
    assert window.start == window_start + ONE_HOUR
    assert window.end == end
    assert window.step_hours == 1


def test_start_moves_to_end_when_step_overshoots(window_start):
    end = window_start + timedelta(hours=2)
    window = normalize_time_window(window_start, end, timedelta(hours=3))
    assert window.start == end


def test_start_equal_to_end(window_start):
    window = normalize_time_window(window_start, window_start, ONE_HOUR)
    assert window.start == window.end == window_start


def test_long_range_requires_coarse_step(window_start):
    end = window_start + timedelta(days=31)
    with pytest.raises(StepTooSmallForRangeError):
        normalize_time_window(window_start, end, timedelta(hours=12))

    window = normalize_time_window(window_start, end, timedelta(hours=24))
    assert window.step == timedelta(hours=24)


def test_range_of_exactly_the_limit_accepts_fine_step(window_start):
    end = window_start + timedelta(days=30)
    window = normalize_time_window(window_start, end, ONE_HOUR)
    assert window.start == window_start + ONE_HOUR


def test_step_must_be_whole_hours(window_start):
    end = window_start + timedelta(days=1)
    with pytest.raises(StepNotIntegerHoursError) as exc_info:
        normalize_time_window(window_start, end, timedelta(minutes=90))
    assert isinstance(exc_info.value, MeterValidationError)
    assert isinstance(exc_info.value, ValueError)


def test_custom_limits(window_start):
    end = window_start + timedelta(days=3)
    with pytest.raises(StepTooSmallForRangeError):
        normalize_time_window(
            window_start, end, ONE_HOUR, max_fine_range=timedelta(days=2), min_coarse_step=timedelta(hours=6)
        )


def test_scaling_factor_map_uses_step_hours():
    factors = generate_scaling_factor_map(timedelta(hours=3))
    assert set(factors) == set(METER_RESOURCE_MAP)
    assert factors["meter_pod_cpu_usage"] == 3.0
    assert "meter_pod_net_bytes_received" not in factors


def test_half_hour_window_with_half_hour_step(window_start):
    end = window_start + timedelta(minutes=30)
    window = normalize_time_window(window_start, end, timedelta(minutes=30))
    assert window.step == ONE_HOUR
    assert window.start == end


def test_ninety_minute_step_on_short_range(window_start):
    with pytest.raises(StepNotIntegerHoursError):
        normalize_time_window(window_start, window_start + timedelta(hours=2), timedelta(minutes=90))
