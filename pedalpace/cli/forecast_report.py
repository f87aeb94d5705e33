#!/usr/bin/env python3
"""
forecast_report.py: Daily cycling forecast report.

Fetches (or loads) a multi-day forecast, aggregates it into days, scores each
day for cycling and prints one card per day (chronological, or best first with
--rank) plus the best day to ride. --table prints a compact score table instead
of cards.

Usage:
    python -m pedalpace.cli.forecast_report --lat 52.52 --lon 13.40 [--tz Europe/Berlin] [--ai]
    python -m pedalpace.cli.forecast_report --input forecast.json [--days 3] [--rank | --table]
"""

import argparse
import sys
from typing import List, Optional, Sequence

import pandas as pd

from pedalpace.api import openweather_client
from pedalpace.api.ai_tip import ProTipService, with_ai_reasoning
from pedalpace.config import DEFAULT_TIMEZONE, MAX_FORECAST_DAYS
from pedalpace.core.forecast_aggregator import aggregate, summaries_to_frame
from pedalpace.core.ranking import ScoredDay, pick_best, rank_days, score_days
from pedalpace.models.weather import ForecastResponse, metrics_by_name
from pedalpace.utils.log_util import app_logger
from pedalpace.utils.weather_utils import (
    format_forecast_date,
    get_weather_icon_url,
    ms_to_kmh,
)

logger = app_logger(__name__)

METRIC_COLUMNS = ["Temperature", "Wind", "Precipitation", "Condition", "Humidity"]

# Shared by every report in this process; tips are deduplicated per forecast snapshot
tip_service = ProTipService()


def load_response(args) -> Optional[ForecastResponse]:
    """Load the forecast from --input or fetch it for --lat/--lon."""
    if args.input:
        return openweather_client.load_forecast_file(args.input)
    return openweather_client.get_forecast(args.lat, args.lon)


def print_day_card(entry: ScoredDay, tz: str) -> None:
    """Print one day's card."""
    day, result = entry
    condition = day.condition.category if day.condition else "Clear"

    print(f"📅 {format_forecast_date(day.timestamp, tz)}")
    print(
        f"   {result.total_score}/100 {result.recommendation.name} - {result.overall_rating}"
    )
    print(
        f"   🌡️ {day.temperature.min:.0f}°/{day.temperature.max:.0f}°C  "
        f"💨 {ms_to_kmh(day.wind_speed):.0f} km/h  "
        f"🌧️ {day.precip_probability * 100:.0f}%  "
        f"💧 {day.humidity}%  {condition}"
    )
    icon_url = get_weather_icon_url(day.condition.icon) if day.condition else ""
    if icon_url:
        print(f"   🖼️ {icon_url}")
    for metric in result.metrics:
        print(
            f"     {metric.icon} {metric.name:<13} {metric.score:>3} "
            f"(x{metric.weight:.2f})  {metric.description}"
        )
    print()


def build_score_table(scored: Sequence[ScoredDay], tz: str) -> pd.DataFrame:
    """
    Tabular view of scored days: daily summary columns plus total and metric scores.

    :param scored: (DailySummary, Score) pairs, in display order
    :param tz: Timezone used to format the date column
    :return: DataFrame with one row per day
    """
    df = summaries_to_frame([day for day, _ in scored])
    df.insert(0, "date", [format_forecast_date(day.timestamp, tz) for day, _ in scored])
    df["score"] = [result.total_score for _, result in scored]
    df["recommendation"] = [result.recommendation.name for _, result in scored]
    metrics = [metrics_by_name(result) for _, result in scored]
    for name in METRIC_COLUMNS:
        df[f"{name.lower()}_score"] = [m[name].score for m in metrics]
    return df


def print_score_table(scored: Sequence[ScoredDay], tz: str) -> None:
    df = build_score_table(scored, tz)
    columns = ["date", "score", "recommendation", "temp_min", "temp_max", "condition"]
    columns += [f"{name.lower()}_score" for name in METRIC_COLUMNS]
    print(df[columns].to_string(index=False))
    print()


def print_best_day(best: ScoredDay, tz: str) -> None:
    day, result = best
    print("🏆 BEST DAY TO RIDE")
    print("=" * 20)
    print(
        f"{format_forecast_date(day.timestamp, tz)}: "
        f"{result.total_score}/100 {result.recommendation.name}"
    )
    if result.ai_reasoning:
        print(f"💡 Pro-Tip: {result.ai_reasoning}")
    print()


def handle_report(args) -> int:
    """Build and print the report. Returns the process exit code."""
    try:
        response = load_response(args)
    except FileNotFoundError as e:
        print(f"❌ Forecast file not found: {e}")
        return 1
    except ValueError as e:
        print(f"❌ Invalid forecast data: {e}")
        return 1

    if response is None:
        print("❌ Network Error: could not fetch forecast")
        return 1

    try:
        summaries = aggregate(response.samples, tz=args.tz, max_days=args.days)
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    if not summaries:
        print("📭 No forecast samples returned.")
        return 0

    scored = score_days(summaries)
    best = pick_best(scored)

    if args.ai and best is not None:
        tip = tip_service.tip_for(response, best[0])
        best = (best[0], with_ai_reasoning(best[1], tip))

    location = response.location
    print("🚴 CYCLING FORECAST")
    print("=" * 50)
    if location.name:
        print(f"📍 {location.name}, {location.country}")
    print(f"🕒 Timezone: {args.tz}")
    print()

    ordered: List[ScoredDay] = rank_days(scored) if args.rank else scored
    if args.table:
        print_score_table(ordered, args.tz)
    else:
        for entry in ordered:
            print_day_card(entry, args.tz)

    if best is not None:
        print_best_day(best, args.tz)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Daily cycling suitability forecast")

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--lat", type=float, help="Latitude (requires --lon)")
    source.add_argument("--input", help="Saved forecast JSON payload")

    parser.add_argument("--lon", type=float, help="Longitude")
    parser.add_argument(
        "--tz", default=DEFAULT_TIMEZONE, help="Timezone for calendar days (IANA name)"
    )
    parser.add_argument(
        "--days", type=int, default=MAX_FORECAST_DAYS, help="Maximum days to show"
    )
    parser.add_argument(
        "--ai", action="store_true", help="Request an AI pro tip for the best day"
    )

    layout = parser.add_mutually_exclusive_group()
    layout.add_argument(
        "--rank", action="store_true", help="Order days best first instead of by date"
    )
    layout.add_argument(
        "--table", action="store_true", help="Print a score table instead of cards"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.lat is not None and args.lon is None:
        parser.error("--lat requires --lon")
    if args.days < 1:
        parser.error("--days must be at least 1")

    try:
        return handle_report(args)
    except Exception as e:
        logger.exception(f"Error in forecast report: {e}")
        print(f"❌ Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
