# config.py
"""
Configurations for the PedalPace ride forecaster.

Endpoints, scoring constants and defaults shared across the application.
Secrets live in ``.streamlit/secrets.toml`` (or the environment) and are read
through ``get_secret``.
"""

import os
from typing import Optional

from pedalpace.utils.log_util import app_logger

logger = app_logger(__name__)

# Forecast source
OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
OPENWEATHER_ICON_URL = "https://openweathermap.org/img/wn/"
OPENWEATHER_UNITS = "metric"
REQUEST_TIMEOUT_SECONDS = 30

# Aggregation
DEFAULT_TIMEZONE = "UTC"
MAX_FORECAST_DAYS = 6

# AI pro-tip
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL = "gemini-2.5-flash"
FALLBACK_PRO_TIP = "Check your tire pressure and stay hydrated."

# Scoring weights (must sum to 1.0)
metric_weights = {
    "Temperature": 0.25,
    "Wind": 0.20,
    "Precipitation": 0.25,
    "Condition": 0.20,
    "Humidity": 0.10,
}

MS_TO_KMH = 3.6
SAFETY_SCORE_CAP = 30
FREEZING_MAX_TEMP_C = -10.0
EXTREME_WIND_KMH = 35.0
STORM_CODE_LIMIT = 300
CLEAR_SKY_CODE = 800


def get_secret(key: str, default: Optional[str] = None) -> Optional[str]:
    """
    Read a secret from Streamlit secrets, falling back to the environment.

    :param key: Secret name, e.g. ``OPENWEATHER_API_KEY``.
    :param default: Value returned when the secret is not configured anywhere.
    :return: str or default
    """
    try:
        import streamlit as st

        if key in st.secrets:
            return st.secrets[key]
    except Exception as e:
        # No secrets.toml outside a configured deployment
        logger.debug(f"Streamlit secrets unavailable for {key}: {e}")

    return os.getenv(key, default)
