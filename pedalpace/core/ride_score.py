"""
Ride Suitability Scoring

Turns one DailySummary into a 0-100 cycling suitability score.

Scoring model (weights in config.metric_weights):
- Temperature: 25% - daily max, optimal 15-25°C
- Wind: 20% - average speed in km/h, calm below 10
- Precipitation: 25% - 100 x (1 - probability)
- Condition: 20% - OpenWeatherMap condition code of the dominant condition
- Humidity: 10% - optimal 35-55%

Composite = floor(sum(score x weight)). A safety override caps the composite
at 30 when the day is freezing (max < -10°C), extremely windy (> 35 km/h) or
stormy (condition code < 300), whatever the other metrics say.

Recommendation tiers (on the capped score):
- Excellent: ≥85
- Good: ≥65
- Moderate: ≥40
- Poor: below 40

Every threshold lives in an ordered band table; the first matching band wins.

Usage:
    from pedalpace.core.ride_score import score

    result = score(daily_summary)
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, TypeVar

from pedalpace.config import (
    CLEAR_SKY_CODE,
    EXTREME_WIND_KMH,
    FREEZING_MAX_TEMP_C,
    SAFETY_SCORE_CAP,
    STORM_CODE_LIMIT,
    metric_weights,
)
from pedalpace.models.weather import (
    DailySummary,
    MetricResult,
    Recommendation,
    Score,
    WeatherCondition,
)
from pedalpace.utils.log_util import app_logger
from pedalpace.utils.weather_utils import ms_to_kmh, round_half_away

logger = app_logger(__name__)

T = TypeVar("T")
Band = Tuple[Callable[[float], bool], T]


def first_match(bands: List[Band], value: float, default: T) -> T:
    """
    Return the result of the first band whose predicate accepts ``value``.

    :param bands: Ordered list of (predicate, result) pairs
    :param value: Input value
    :param default: Result when no band matches
    """
    for predicate, result in bands:
        if predicate(value):
            return result
    return default


def _between(low: float, high: float) -> Callable[[float], bool]:
    return lambda v: low <= v <= high


def _below(limit: float) -> Callable[[float], bool]:
    return lambda v: v < limit


# ========================================
# Band tables
# ========================================
TEMPERATURE_SCORE_BANDS = [
    (lambda t: t < -10 or t > 40, 0),
    (_between(15, 25), 100),
    (_between(10, 30), 80),
    (_between(0, 35), 40),
]
TEMPERATURE_DESCRIPTION_BANDS = [
    (_below(0), "Very cold, wear thermal gear"),
    (_below(12), "Chilly, wear layers"),
    (_between(15, 25), "Perfect cycling temperature"),
    (_below(32), "Warm, stay hydrated"),
]
TEMPERATURE_ICON_BANDS = [
    (_between(15, 25), "🌡️"),
    (lambda t: t > 25, "🔥"),
]

# km/h
WIND_SCORE_BANDS = [
    (_below(10), 100),
    (_below(15), 80),
    (_below(22), 50),
    (_below(30), 20),
]
WIND_DESCRIPTION_BANDS = [
    (_below(10), "Calm, perfect for any ride"),
    (_below(20), "Moderate breeze"),
]
WIND_ICON_BANDS = [
    (_below(15), "🍃"),
]

PRECIPITATION_DESCRIPTION_BANDS = [
    (_below(0.1), "Dry conditions expected"),
    (_below(0.4), "Light rain possible"),
]
PRECIPITATION_ICON_BANDS = [
    (_below(0.2), "☀️"),
]

CONDITION_SCORE_BANDS = [
    (lambda c: c == 800, 100),  # clear
    (_between(801, 804), 85),  # clouds
    (_between(701, 781), 60),  # atmosphere
    (_between(300, 321), 40),  # drizzle
    (_between(500, 531), 20),  # rain
]

HUMIDITY_SCORE_BANDS = [
    (_between(35, 55), 100),
    (_between(30, 70), 80),
]
HUMIDITY_DESCRIPTION_BANDS = [
    (lambda h: h > 70, "Humid air, feels heavier"),
]

RECOMMENDATION_BANDS = [
    (lambda s: s >= 85, Recommendation.EXCELLENT),
    (lambda s: s >= 65, Recommendation.GOOD),
    (lambda s: s >= 40, Recommendation.MODERATE),
]

RATING_MESSAGE_BANDS = [
    (lambda s: s >= 85, "Perfect for cycling! 🚴"),
    (lambda s: s >= 65, "Great conditions! 🌤️"),
    (lambda s: s >= 40, "Manageable conditions ⚠️"),
]

FREEZING_MESSAGE = "Dangerous cold! Stay indoors. ❄️"
EXTREME_WIND_MESSAGE = "Extreme winds! High risk of crashes. 💨"
HAZARD_MESSAGE = "Hazardous conditions detected. ⚠️"


# ========================================
# Metrics
# ========================================
def temperature_metric(max_temp: float) -> MetricResult:
    """Score the day's maximum temperature (°C)."""
    return MetricResult(
        name="Temperature",
        score=first_match(TEMPERATURE_SCORE_BANDS, max_temp, 10),
        weight=metric_weights["Temperature"],
        description=first_match(
            TEMPERATURE_DESCRIPTION_BANDS, max_temp, "Extremely hot, stay safe"
        ),
        icon=first_match(TEMPERATURE_ICON_BANDS, max_temp, "❄️"),
    )


def wind_metric(wind_speed_ms: float) -> MetricResult:
    """Score average wind speed, given in m/s and judged in km/h."""
    kmh = ms_to_kmh(wind_speed_ms)
    return MetricResult(
        name="Wind",
        score=first_match(WIND_SCORE_BANDS, kmh, 0),
        weight=metric_weights["Wind"],
        description=first_match(
            WIND_DESCRIPTION_BANDS, kmh, "Strong winds, expect resistance"
        ),
        icon=first_match(WIND_ICON_BANDS, kmh, "💨"),
    )


def precipitation_metric(probability: float) -> MetricResult:
    """Score precipitation probability (0.0-1.0)."""
    raw = round_half_away(100 * (1.0 - probability))
    return MetricResult(
        name="Precipitation",
        score=max(0, min(100, raw)),
        weight=metric_weights["Precipitation"],
        description=first_match(
            PRECIPITATION_DESCRIPTION_BANDS, probability, "High rain probability"
        ),
        icon=first_match(PRECIPITATION_ICON_BANDS, probability, "🌧️"),
    )


def condition_metric(condition: Optional[WeatherCondition]) -> MetricResult:
    """Score the dominant condition code; a missing condition counts as clear sky."""
    code = condition.code if condition else CLEAR_SKY_CODE
    if condition and condition.description:
        description = condition.description[0].upper() + condition.description[1:]
    else:
        description = "Clear skies"

    return MetricResult(
        name="Condition",
        score=first_match(CONDITION_SCORE_BANDS, code, 0),
        weight=metric_weights["Condition"],
        description=description,
        icon="🌤️",
    )


def humidity_metric(humidity: int) -> MetricResult:
    """Score average relative humidity (%)."""
    return MetricResult(
        name="Humidity",
        score=first_match(HUMIDITY_SCORE_BANDS, humidity, 50),
        weight=metric_weights["Humidity"],
        description=first_match(
            HUMIDITY_DESCRIPTION_BANDS, humidity, "Comfortable air quality"
        ),
        icon="💧",
    )


# ========================================
# Composite
# ========================================
@dataclass(frozen=True)
class SafetyFlags:
    """Hazards that cap the composite score."""

    freezing: bool
    extreme_wind: bool
    stormy: bool

    @property
    def triggered(self) -> bool:
        return self.freezing or self.extreme_wind or self.stormy


def evaluate_safety(day: DailySummary) -> SafetyFlags:
    """
    Check a day for life-safety hazards.

    :param day: Daily summary
    :return: SafetyFlags
    """
    code = day.condition.code if day.condition else CLEAR_SKY_CODE
    return SafetyFlags(
        freezing=day.temperature.max < FREEZING_MAX_TEMP_C,
        extreme_wind=ms_to_kmh(day.wind_speed) > EXTREME_WIND_KMH,
        stormy=code < STORM_CODE_LIMIT,
    )


def recommendation_for(total_score: int) -> Recommendation:
    """Map a composite score to a recommendation tier."""
    return first_match(RECOMMENDATION_BANDS, total_score, Recommendation.POOR)


def rating_message(total_score: int, flags: SafetyFlags) -> str:
    """Pick the headline message; hazard messages take priority over score bands."""
    if flags.freezing:
        return FREEZING_MESSAGE
    if flags.extreme_wind:
        return EXTREME_WIND_MESSAGE
    if flags.triggered:
        return HAZARD_MESSAGE
    return first_match(
        RATING_MESSAGE_BANDS, total_score, "Better to stay indoors today 🏠"
    )


def score(day: DailySummary) -> Score:
    """
    Compute the cycling suitability score for one day.

    :param day: Daily summary
    :return: Score with metrics ordered Temperature, Wind, Precipitation,
             Condition, Humidity. ``ai_reasoning`` is left empty.
    """
    metrics = (
        temperature_metric(day.temperature.max),
        wind_metric(day.wind_speed),
        precipitation_metric(day.precip_probability),
        condition_metric(day.condition),
        humidity_metric(day.humidity),
    )

    weighted = sum(m.score * m.weight for m in metrics)
    # Guard the float sum (e.g. 99.99999) so all-100 metrics still floor to 100
    total = int(math.floor(weighted + 1e-9))
    total = max(0, min(100, total))

    flags = evaluate_safety(day)
    if flags.triggered:
        total = min(total, SAFETY_SCORE_CAP)

    logger.debug(
        f"Scored day {day.timestamp}: weighted={weighted:.2f}, total={total}, "
        f"freezing={flags.freezing}, extreme_wind={flags.extreme_wind}, "
        f"stormy={flags.stormy}"
    )

    return Score(
        total_score=total,
        recommendation=recommendation_for(total),
        metrics=metrics,
        overall_rating=rating_message(total, flags),
        safety_triggered=flags.triggered,
    )
