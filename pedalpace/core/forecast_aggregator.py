"""
Forecast Aggregation

Groups a flat list of 3-hourly forecast samples into per-calendar-day
summaries.

Key behaviors:
- Calendar days are taken in an explicit timezone (UTC unless told otherwise)
- Days are emitted in the order they first appear in the input, not sorted
- Only the first ``max_days`` days are kept (6 by default)
- Dominant condition is the most frequent condition category of the day;
  ties go to the category seen first

Usage:
    from pedalpace.core.forecast_aggregator import aggregate

    summaries = aggregate(response.samples, tz="Europe/Berlin")
"""

from collections import Counter
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from pedalpace.config import DEFAULT_TIMEZONE, MAX_FORECAST_DAYS
from pedalpace.models.weather import (
    DailySummary,
    RawSample,
    TemperatureSummary,
    WeatherCondition,
    summary_to_dict,
)
from pedalpace.utils.log_util import app_logger
from pedalpace.utils.weather_utils import resolve_timezone, round_half_away

logger = app_logger(__name__)

SAMPLE_COLUMNS = [
    "timestamp",
    "temp",
    "temp_min",
    "temp_max",
    "humidity",
    "wind_speed",
    "precip_probability",
]


def samples_to_frame(
    samples: Sequence[RawSample], tz: str = DEFAULT_TIMEZONE
) -> pd.DataFrame:
    """
    Build a DataFrame with one row per sample and a local ``date`` column.

    :param samples: Forecast samples in chronological order
    :param tz: IANA timezone name used to derive the calendar date
    :return: DataFrame with SAMPLE_COLUMNS plus ``datetime``, ``date`` and
             ``sample_idx`` (position in the input)
    """
    tzinfo = resolve_timezone(tz)

    if not samples:
        return pd.DataFrame(columns=SAMPLE_COLUMNS + ["datetime", "date", "sample_idx"])

    df = pd.DataFrame(
        [{col: getattr(s, col) for col in SAMPLE_COLUMNS} for s in samples]
    )
    df["sample_idx"] = range(len(df))
    df["datetime"] = pd.to_datetime(df["timestamp"], unit="s", utc=True).dt.tz_convert(
        tzinfo
    )
    df["date"] = df["datetime"].dt.strftime("%Y-%m-%d")
    return df


def dominant_condition(
    conditions: Iterable[WeatherCondition],
) -> Optional[WeatherCondition]:
    """
    Pick the condition whose category occurs most often.

    :param conditions: Conditions in encounter order
    :return: First condition of the winning category, or None when empty
    """
    conditions = list(conditions)
    if not conditions:
        return None

    counts = Counter(c.category for c in conditions)
    top = max(counts.values())
    return next(c for c in conditions if counts[c.category] == top)


def _summarize_day(day_samples: List[RawSample], group: pd.DataFrame) -> DailySummary:
    first = day_samples[0]
    conditions = [c for s in day_samples for c in s.conditions]
    condition = dominant_condition(conditions) or first.primary_condition

    return DailySummary(
        timestamp=first.timestamp,
        temperature=TemperatureSummary(
            day=round_half_away(group["temp"].mean()),
            min=float(group["temp_min"].min()),
            max=float(group["temp_max"].max()),
            night=float(day_samples[-1].temp),
        ),
        condition=condition,
        humidity=round_half_away(group["humidity"].mean()),
        wind_speed=float(group["wind_speed"].mean()),
        precip_probability=float(group["precip_probability"].mean()),
    )


def aggregate(
    samples: Sequence[RawSample],
    tz: str = DEFAULT_TIMEZONE,
    max_days: int = MAX_FORECAST_DAYS,
) -> List[DailySummary]:
    """
    Aggregate forecast samples into daily summaries.

    :param samples: Forecast samples in chronological order
    :param tz: IANA timezone name used to group samples by calendar date
    :param max_days: Maximum number of days to return
    :return: List of DailySummary, one per day in order of first appearance.
             Empty input yields an empty list.
    """
    if not samples:
        logger.info("No forecast samples provided for aggregation")
        return []

    df = samples_to_frame(samples, tz)

    summaries = []
    for date_key, group in df.groupby("date", sort=False):
        if len(summaries) >= max_days:
            break
        day_samples = [samples[i] for i in group["sample_idx"]]
        summaries.append(_summarize_day(day_samples, group))
        logger.debug(f"Aggregated {len(day_samples)} samples for {date_key}")

    logger.info(
        f"Aggregated {len(samples)} samples into {len(summaries)} days ({tz})"
    )
    return summaries


def summaries_to_frame(summaries: Sequence[DailySummary]) -> pd.DataFrame:
    """Tabular view of daily summaries, one row per day."""
    return pd.DataFrame([summary_to_dict(day) for day in summaries])
