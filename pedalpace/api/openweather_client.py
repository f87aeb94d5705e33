"""
openweather_client.py: Lightweight interface to the OpenWeatherMap 5-day /
3-hour forecast API using direct requests.

Functions:
- get_forecast_raw(lat, lon)
- get_forecast(lat, lon)
- load_forecast_file(path)

Requires:
- Secret OPENWEATHER_API_KEY (Streamlit secrets or environment)
"""

import json
from pathlib import Path
from typing import Dict, Optional

import requests

from pedalpace.config import (
    OPENWEATHER_BASE_URL,
    OPENWEATHER_UNITS,
    REQUEST_TIMEOUT_SECONDS,
    get_secret,
)
from pedalpace.models.weather import ForecastResponse, parse_forecast
from pedalpace.utils.log_util import app_logger

logger = app_logger(__name__)


def get_forecast_raw(lat: float, lon: float) -> Optional[Dict]:
    """
    Fetch the raw forecast payload for a location.

    :param lat: Latitude in degrees.
    :param lon: Longitude in degrees.
    :return: Decoded JSON dict, or None on failure.
    """
    api_key = get_secret("OPENWEATHER_API_KEY")
    if not api_key:
        logger.error("OPENWEATHER_API_KEY is not configured")
        return None

    url = f"{OPENWEATHER_BASE_URL}/forecast"
    params = {
        "lat": lat,
        "lon": lon,
        "appid": api_key,
        "units": OPENWEATHER_UNITS,
    }
    logger.info(f"Fetching forecast: lat={lat}, lon={lon}")

    try:
        resp = requests.get(url, params=params, timeout=REQUEST_TIMEOUT_SECONDS)
        if resp.status_code != 200:
            logger.error(f"Forecast fetch failed: {resp.status_code} {resp.text}")
            return None
        return resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Request error while fetching forecast: {e}")
        return None


def get_forecast(lat: float, lon: float) -> Optional[ForecastResponse]:
    """
    Fetch and parse the forecast for a location.

    :param lat: Latitude in degrees.
    :param lon: Longitude in degrees.
    :return: ForecastResponse, or None when the fetch failed.
    :raises MalformedForecastError: when the payload is structurally invalid.
    """
    raw = get_forecast_raw(lat, lon)
    if not raw:
        return None

    response = parse_forecast(raw)
    logger.info(
        f"Forecast for {response.location.name or 'unknown'}: "
        f"{len(response.samples)} samples"
    )
    return response


def load_forecast_file(path: str) -> ForecastResponse:
    """
    Parse a forecast payload saved to disk.

    :param path: Path to a JSON file with the ``forecast`` endpoint's response.
    :return: ForecastResponse
    :raises FileNotFoundError: when the file doesn't exist.
    :raises MalformedForecastError: when the payload is structurally invalid.
    """
    data_path = Path(path)
    with data_path.open("r", encoding="utf-8") as f:
        payload = json.load(f)

    logger.debug(f"Loaded forecast payload from {data_path}")
    return parse_forecast(payload)
