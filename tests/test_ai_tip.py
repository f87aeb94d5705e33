"""
Tests for the AI pro-tip collaborator
"""

import unittest.mock as mock

import requests

from pedalpace.api.ai_tip import (
    ProTipService,
    build_tip_prompt,
    get_pro_tip,
    with_ai_reasoning,
)
from pedalpace.config import FALLBACK_PRO_TIP
from pedalpace.core.ride_score import score
from pedalpace.models.weather import (
    DailySummary,
    ForecastLocation,
    ForecastResponse,
    RawSample,
    TemperatureSummary,
    WeatherCondition,
)

DAY = DailySummary(
    timestamp=1704067200,
    temperature=TemperatureSummary(day=18, min=12.0, max=21.0, night=14.0),
    condition=WeatherCondition(801, "Clouds", "few clouds", "02d"),
    humidity=55,
    wind_speed=5.0,
    precip_probability=0.25,
)


def make_response(city="Utrecht", first_ts=1704067200):
    sample = RawSample(
        timestamp=first_ts,
        temp=18.0,
        temp_min=12.0,
        temp_max=21.0,
        humidity=55,
        wind_speed=5.0,
        precip_probability=0.25,
    )
    location = ForecastLocation(1, city, "NL", 52.09, 5.12)
    return ForecastResponse(location=location, samples=(sample,))


def gemini_response(text):
    resp = mock.Mock()
    resp.raise_for_status.return_value = None
    resp.json.return_value = {
        "candidates": [{"content": {"parts": [{"text": text}]}}]
    }
    return resp


class TestPrompt:
    def test_prompt_contents(self):
        prompt = build_tip_prompt(DAY)

        assert "professional cycling coach" in prompt
        assert "Temp: 18°C" in prompt
        assert "Wind: 18.0 km/h" in prompt
        assert "Precipitation: 25%" in prompt
        assert "1-sentence" in prompt


class TestGetProTip:
    @mock.patch("pedalpace.api.ai_tip.get_secret", return_value=None)
    @mock.patch("pedalpace.api.ai_tip.requests.post")
    def test_no_key_returns_none(self, mock_post, mock_secret):
        assert get_pro_tip(DAY) is None
        mock_post.assert_not_called()

    @mock.patch("pedalpace.api.ai_tip.get_secret", return_value="KEY")
    @mock.patch("pedalpace.api.ai_tip.requests.post")
    def test_returns_model_text(self, mock_post, mock_secret):
        mock_post.return_value = gemini_response("  Lower your tire pressure a bit.  ")

        assert get_pro_tip(DAY) == "Lower your tire pressure a bit."
        url = mock_post.call_args[0][0]
        assert url.endswith("/models/gemini-2.5-flash:generateContent")
        assert mock_post.call_args[1]["params"] == {"key": "KEY"}

    @mock.patch("pedalpace.api.ai_tip.get_secret", return_value="KEY")
    @mock.patch("pedalpace.api.ai_tip.requests.post")
    def test_http_error_returns_fallback(self, mock_post, mock_secret):
        resp = mock.Mock()
        resp.status_code = 429
        resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
        mock_post.return_value = resp

        assert get_pro_tip(DAY) == FALLBACK_PRO_TIP

    @mock.patch("pedalpace.api.ai_tip.get_secret", return_value="KEY")
    @mock.patch("pedalpace.api.ai_tip.requests.post")
    def test_network_error_returns_fallback(self, mock_post, mock_secret):
        mock_post.side_effect = requests.Timeout("slow")
        assert get_pro_tip(DAY) == FALLBACK_PRO_TIP

    @mock.patch("pedalpace.api.ai_tip.get_secret", return_value="KEY")
    @mock.patch("pedalpace.api.ai_tip.requests.post")
    def test_empty_text_returns_fallback(self, mock_post, mock_secret):
        mock_post.return_value = gemini_response("")
        assert get_pro_tip(DAY) == FALLBACK_PRO_TIP


class TestWithAiReasoning:
    def test_returns_new_score(self):
        original = score(DAY)
        tipped = with_ai_reasoning(original, "Ride early.")

        assert tipped.ai_reasoning == "Ride early."
        assert original.ai_reasoning is None
        assert tipped.total_score == original.total_score
        assert tipped.metrics == original.metrics


class TestProTipService:
    @mock.patch("pedalpace.api.ai_tip.get_pro_tip", return_value="Wear a wind vest.")
    def test_same_snapshot_fetched_once(self, mock_tip):
        service = ProTipService()
        response = make_response()

        assert service.tip_for(response, DAY) == "Wear a wind vest."
        assert service.tip_for(response, DAY) == "Wear a wind vest."
        assert mock_tip.call_count == 1

    @mock.patch("pedalpace.api.ai_tip.get_pro_tip", return_value="Wear a wind vest.")
    def test_new_snapshot_refetches(self, mock_tip):
        service = ProTipService()

        service.tip_for(make_response(first_ts=1), DAY)
        service.tip_for(make_response(first_ts=2), DAY)

        assert mock_tip.call_count == 2

    @mock.patch("pedalpace.api.ai_tip.get_pro_tip", return_value=FALLBACK_PRO_TIP)
    def test_failure_allows_retry(self, mock_tip):
        service = ProTipService()
        response = make_response()

        service.tip_for(response, DAY)
        assert service.last_snapshot_id is None
        service.tip_for(response, DAY)

        assert mock_tip.call_count == 2
