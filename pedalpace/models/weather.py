"""
Weather data models and type definitions.

This module provides type-safe data structures for forecast samples, daily
summaries and ride scores, plus the parsers that build them from the
OpenWeatherMap 5-day/3-hour forecast payload.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class MalformedForecastError(ValueError):
    """Raised when forecast data is missing a required field or has a non-numeric value."""


@dataclass(frozen=True)
class WeatherCondition:
    """A single weather condition entry (OpenWeatherMap condition code)."""

    code: int
    category: str
    description: str
    icon: str = ""


@dataclass(frozen=True)
class RawSample:
    """One forecast data point at a fixed UTC timestamp (seconds)."""

    timestamp: int
    temp: float
    temp_min: float
    temp_max: float
    humidity: int
    wind_speed: float
    precip_probability: float
    conditions: tuple = ()

    @property
    def primary_condition(self) -> Optional[WeatherCondition]:
        return self.conditions[0] if self.conditions else None


@dataclass(frozen=True)
class TemperatureSummary:
    """Daily temperature aggregate in °C. ``night`` is the last sample's temperature."""

    day: int
    min: float
    max: float
    night: float


@dataclass(frozen=True)
class DailySummary:
    """Aggregated weather statistics for one calendar day."""

    timestamp: int
    temperature: TemperatureSummary
    condition: Optional[WeatherCondition]
    humidity: int
    wind_speed: float
    precip_probability: float


@dataclass(frozen=True)
class MetricResult:
    """One named, weighted sub-score contributing to the ride score."""

    name: str
    score: int
    weight: float
    description: str
    icon: str


class Recommendation(Enum):
    """Recommendation tiers, best first. Tiers compare by rank (EXCELLENT > POOR)."""

    EXCELLENT = 4
    GOOD = 3
    MODERATE = 2
    POOR = 1
    DANGEROUS = 0

    def __lt__(self, other):
        if not isinstance(other, Recommendation):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other):
        if not isinstance(other, Recommendation):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other):
        if not isinstance(other, Recommendation):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other):
        if not isinstance(other, Recommendation):
            return NotImplemented
        return self.value >= other.value


@dataclass(frozen=True)
class Score:
    """Composite ride score for one day."""

    total_score: int
    recommendation: Recommendation
    metrics: tuple
    overall_rating: str
    safety_triggered: bool = False
    ai_reasoning: Optional[str] = None


@dataclass(frozen=True)
class ForecastLocation:
    """City metadata returned with the forecast."""

    city_id: int
    name: str
    country: str
    lat: float
    lon: float


@dataclass(frozen=True)
class ForecastResponse:
    """A full forecast fetch: location plus chronologically ordered samples."""

    location: ForecastLocation
    samples: tuple = field(default_factory=tuple)

    @property
    def snapshot_id(self) -> str:
        """Identifier for this fetch cycle: city name plus first sample timestamp."""
        first = self.samples[0].timestamp if self.samples else None
        return f"{self.location.name}-{first}"


# ========================================
# Parsers
# ========================================
def _require(data: Dict[str, Any], key: str, context: str) -> Any:
    if not isinstance(data, dict) or key not in data or data[key] is None:
        raise MalformedForecastError(f"Missing required field '{context}{key}'")
    return data[key]


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise MalformedForecastError(f"Field '{name}' is not numeric: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedForecastError(f"Field '{name}' is not numeric: {value!r}")
    if not math.isfinite(number):
        raise MalformedForecastError(f"Field '{name}' is not finite: {value!r}")
    return number


def _as_int(value: Any, name: str) -> int:
    return int(_as_float(value, name))


def parse_condition(data: Dict[str, Any]) -> WeatherCondition:
    """Build a WeatherCondition from one ``weather[]`` entry."""
    return WeatherCondition(
        code=_as_int(_require(data, "id", "weather."), "weather.id"),
        category=str(_require(data, "main", "weather.")),
        description=str(data.get("description", "")),
        icon=str(data.get("icon", "")),
    )


def parse_sample(item: Dict[str, Any]) -> RawSample:
    """
    Build a RawSample from one entry of the forecast ``list``.

    :param item: dict with ``dt``, ``main``, ``wind``, ``weather`` and optional ``pop``.
    :return: RawSample
    :raises MalformedForecastError: when a required field is missing or not numeric.
    """
    main = _require(item, "main", "")
    wind = _require(item, "wind", "")
    weather = item.get("weather") or []
    if not isinstance(weather, list):
        raise MalformedForecastError(f"Field 'weather' is not a list: {weather!r}")
    conditions = tuple(parse_condition(w) for w in weather)

    return RawSample(
        timestamp=_as_int(_require(item, "dt", ""), "dt"),
        temp=_as_float(_require(main, "temp", "main."), "main.temp"),
        temp_min=_as_float(_require(main, "temp_min", "main."), "main.temp_min"),
        temp_max=_as_float(_require(main, "temp_max", "main."), "main.temp_max"),
        humidity=_as_int(_require(main, "humidity", "main."), "main.humidity"),
        wind_speed=_as_float(_require(wind, "speed", "wind."), "wind.speed"),
        precip_probability=_as_float(item.get("pop", 0.0), "pop"),
        conditions=conditions,
    )


def parse_location(city: Dict[str, Any]) -> ForecastLocation:
    """Build a ForecastLocation from the payload's ``city`` block."""
    if not isinstance(city, dict):
        raise MalformedForecastError(f"Field 'city' is not an object: {city!r}")
    coord = city.get("coord") or {}
    if not isinstance(coord, dict):
        raise MalformedForecastError(f"Field 'city.coord' is not an object: {coord!r}")
    return ForecastLocation(
        city_id=_as_int(city.get("id", 0), "city.id"),
        name=str(city.get("name", "")),
        country=str(city.get("country", "")),
        lat=_as_float(coord.get("lat", 0.0), "city.coord.lat"),
        lon=_as_float(coord.get("lon", 0.0), "city.coord.lon"),
    )


def parse_forecast(payload: Dict[str, Any]) -> ForecastResponse:
    """
    Parse a full forecast payload.

    :param payload: Decoded JSON from the ``forecast`` endpoint.
    :return: ForecastResponse with samples in payload order.
    :raises MalformedForecastError: when the payload is structurally invalid.
    """
    items = _require(payload, "list", "")
    if not isinstance(items, list):
        raise MalformedForecastError("Field 'list' is not a list")

    return ForecastResponse(
        location=parse_location(payload.get("city") or {}),
        samples=tuple(parse_sample(item) for item in items),
    )


def summary_to_dict(day: DailySummary) -> Dict[str, Any]:
    """Flatten a DailySummary into a plain dict (used for tabular output)."""
    condition = day.condition
    return {
        "timestamp": day.timestamp,
        "temp_day": day.temperature.day,
        "temp_min": day.temperature.min,
        "temp_max": day.temperature.max,
        "temp_night": day.temperature.night,
        "condition_code": condition.code if condition else None,
        "condition": condition.category if condition else None,
        "humidity": day.humidity,
        "wind_speed": day.wind_speed,
        "precip_probability": day.precip_probability,
    }


def metrics_by_name(score: Score) -> Dict[str, MetricResult]:
    """Index a score's metrics by name."""
    return {m.name: m for m in score.metrics}


