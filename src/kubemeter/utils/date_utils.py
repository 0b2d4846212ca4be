# src/kubemeter/utils/date_utils.py
"""
Timestamp and duration helpers for CLI input and Prometheus query parameters.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

_DURATION_RE = re.compile(r"^(\d+)(s|m|min|h|d|w)$")
_DURATION_UNITS = {"s": "seconds", "m": "minutes", "min": "minutes", "h": "hours", "d": "days", "w": "weeks"}


def parse_iso_date(date_str: str) -> Optional[datetime]:
    """
    Parses an ISO 8601 timestamp. A trailing 'Z' is accepted on every
    supported Python version. Returns None for empty or unparsable input.
    """
    if not date_str:
        return None
    if date_str.endswith("Z"):
        date_str = date_str[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(date_str)
    except ValueError:
        return None


def ensure_utc(dt: Union[datetime, str]) -> datetime:
    """
    Returns an aware UTC datetime. Strings are parsed first and naive values
    are taken to be UTC.

    Raises:
        ValueError: If a string cannot be parsed.
    """
    if isinstance(dt, str):
        parsed = parse_iso_date(dt)
        if parsed is None:
            raise ValueError(f"Invalid date string: {dt}")
        dt = parsed

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso_z(dt: datetime) -> str:
    """RFC 3339 form with a 'Z' suffix, as accepted by the Prometheus API."""
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def parse_duration(value: str) -> timedelta:
    """Parses a duration such as '90m', '1h' or '7d' into a timedelta."""
    match = _DURATION_RE.match(value.strip().lower())
    if not match:
        raise ValueError(f"Invalid duration '{value}'. Use a number followed by s, m, h, d or w (e.g. '1h').")
    amount, unit = int(match.group(1)), match.group(2)
    return timedelta(**{_DURATION_UNITS[unit]: amount})
