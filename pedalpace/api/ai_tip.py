"""
ai_tip.py: Optional one-sentence "pro tip" for a ride day, generated by the
Gemini API.

The tip is produced after scoring and attached to a Score with
``with_ai_reasoning``; scoring never waits on it.

Requires:
- Secret GEMINI_API_KEY (Streamlit secrets or environment). Without it no
  tip is requested.
"""

from dataclasses import replace
from typing import Optional

import requests

from pedalpace.config import (
    FALLBACK_PRO_TIP,
    GEMINI_BASE_URL,
    GEMINI_MODEL,
    REQUEST_TIMEOUT_SECONDS,
    get_secret,
)
from pedalpace.models.weather import DailySummary, ForecastResponse, Score
from pedalpace.utils.log_util import app_logger
from pedalpace.utils.weather_utils import ms_to_kmh

logger = app_logger(__name__)


def build_tip_prompt(day: DailySummary) -> str:
    """Prompt asking a cycling coach persona for a one-sentence tip."""
    return (
        "You are a professional cycling coach. Based on these weather conditions:\n"
        f"Temp: {day.temperature.day}°C,\n"
        f"Wind: {ms_to_kmh(day.wind_speed):.1f} km/h,\n"
        f"Precipitation: {day.precip_probability * 100:.0f}%.\n"
        "\n"
        'Give a 1-sentence "Pro-Tip" for a cyclist today.\n'
        "Focus on gear, safety, or technique. Be encouraging but brief."
    )


def _extract_text(data: dict) -> str:
    candidates = data.get("candidates") or [{}]
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts).strip()


def get_pro_tip(day: DailySummary, model: str = GEMINI_MODEL) -> Optional[str]:
    """
    Ask the model for a pro tip for one day.

    :param day: Day to advise on (usually the best-scoring day).
    :param model: Gemini model name.
    :return: Tip text; the fallback tip when the call fails or returns nothing;
             None when no API key is configured.
    """
    api_key = get_secret("GEMINI_API_KEY")
    if not api_key:
        logger.info("GEMINI_API_KEY not configured, skipping pro tip")
        return None

    url = f"{GEMINI_BASE_URL}/models/{model}:generateContent"
    body = {"contents": [{"parts": [{"text": build_tip_prompt(day)}]}]}

    try:
        resp = requests.post(
            url,
            params={"key": api_key},
            json=body,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
        text = _extract_text(resp.json())
    except requests.HTTPError as http_err:
        status = getattr(http_err.response, "status_code", None)
        logger.warning(f"Pro tip request failed (HTTP {status})")
        return FALLBACK_PRO_TIP
    except (requests.RequestException, ValueError, AttributeError) as e:
        logger.warning(f"Pro tip request error: {e}")
        return FALLBACK_PRO_TIP

    return text or FALLBACK_PRO_TIP


def with_ai_reasoning(score: Score, tip: Optional[str]) -> Score:
    """Return a copy of ``score`` carrying the tip as its AI reasoning."""
    return replace(score, ai_reasoning=tip)


class ProTipService:
    """
    Fetches at most one tip per forecast snapshot.

    A snapshot is identified by city name and first sample timestamp. Repeated
    requests for the same snapshot return the cached tip; a failed request
    clears the snapshot so the next refresh can retry.
    """

    def __init__(self, model: str = GEMINI_MODEL):
        self.model = model
        self.last_snapshot_id: Optional[str] = None
        self.tip: Optional[str] = None

    def tip_for(self, response: ForecastResponse, day: DailySummary) -> Optional[str]:
        snapshot_id = response.snapshot_id
        if snapshot_id == self.last_snapshot_id:
            logger.debug(f"Pro tip already fetched for {snapshot_id}")
            return self.tip

        self.last_snapshot_id = snapshot_id
        tip = get_pro_tip(day, model=self.model)
        if tip is None or tip == FALLBACK_PRO_TIP:
            self.last_snapshot_id = None

        self.tip = tip
        return tip
