"""
Weather utility functions for formatting and calculations.

This module provides reusable conversions and formatting helpers shared by the
scoring core and the report output.
"""

import math
from datetime import datetime

import pytz

from pedalpace.config import MS_TO_KMH, OPENWEATHER_ICON_URL


def ms_to_kmh(speed_ms: float) -> float:
    """
    Convert wind speed from m/s to km/h.

    :param speed_ms: Speed in meters per second
    :return: Speed in kilometers per hour
    """
    return speed_ms * MS_TO_KMH


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3).

    :param value: Number to round
    :return: Rounded integer
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def resolve_timezone(tz_name: str):
    """
    Resolve an IANA timezone name to a pytz timezone.

    :param tz_name: e.g. "UTC" or "America/Los_Angeles"
    :return: pytz timezone
    :raises ValueError: when the name is unknown
    """
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown timezone: {tz_name}")


def format_forecast_date(timestamp: int, tz_name: str = "UTC") -> str:
    """
    Format a forecast timestamp as a card heading, e.g. "Monday, Jan 5".

    :param timestamp: Seconds since epoch (UTC)
    :param tz_name: Timezone used to pick the calendar day
    :return: Formatted date string, or "Unknown Date" when the timestamp is invalid
    """
    try:
        local = datetime.fromtimestamp(timestamp, tz=resolve_timezone(tz_name))
        return f"{local.strftime('%A, %b')} {local.day}"
    except (OverflowError, OSError, ValueError, TypeError):
        return "Unknown Date"


def get_weather_icon_url(icon_code: str) -> str:
    """
    Build the OpenWeatherMap icon URL for a condition icon code.

    :param icon_code: Icon identifier such as "01d"
    :return: URL string, empty when no code is given
    """
    if not icon_code:
        return ""
    return f"{OPENWEATHER_ICON_URL}{icon_code}@2x.png"
