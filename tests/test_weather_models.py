"""
Tests for weather models and payload parsing
"""

import pytest

from pedalpace.models.weather import (
    MalformedForecastError,
    Recommendation,
    parse_forecast,
    parse_sample,
    summary_to_dict,
)


def owm_item(dt=1704067200, **overrides):
    item = {
        "dt": dt,
        "main": {"temp": 18.2, "temp_min": 16.0, "temp_max": 19.5, "humidity": 62},
        "weather": [
            {"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}
        ],
        "wind": {"speed": 3.4, "deg": 240},
        "pop": 0.12,
    }
    item.update(overrides)
    return item


class TestParseSample:
    def test_parses_fields(self):
        sample = parse_sample(owm_item())

        assert sample.timestamp == 1704067200
        assert sample.temp == 18.2
        assert sample.temp_min == 16.0
        assert sample.temp_max == 19.5
        assert sample.humidity == 62
        assert sample.wind_speed == 3.4
        assert sample.precip_probability == 0.12
        assert sample.primary_condition.code == 803
        assert sample.primary_condition.category == "Clouds"

    def test_pop_defaults_to_zero(self):
        item = owm_item()
        del item["pop"]
        assert parse_sample(item).precip_probability == 0.0

    def test_missing_weather_gives_no_condition(self):
        sample = parse_sample(owm_item(weather=[]))
        assert sample.primary_condition is None

    def test_missing_main_raises(self):
        item = owm_item()
        del item["main"]
        with pytest.raises(MalformedForecastError, match="main"):
            parse_sample(item)

    def test_missing_temp_raises(self):
        item = owm_item(main={"temp_min": 1.0, "temp_max": 2.0, "humidity": 50})
        with pytest.raises(MalformedForecastError, match="main.temp"):
            parse_sample(item)

    def test_non_numeric_raises(self):
        item = owm_item(wind={"speed": "breezy"})
        with pytest.raises(MalformedForecastError, match="wind.speed"):
            parse_sample(item)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_sample({"dt": 1})

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_humidity_raises(self, value):
        item = owm_item()
        item["main"]["humidity"] = value
        with pytest.raises(MalformedForecastError, match="main.humidity"):
            parse_sample(item)

    def test_non_finite_wind_raises(self):
        with pytest.raises(MalformedForecastError, match="wind.speed"):
            parse_sample(owm_item(wind={"speed": float("nan")}))

    def test_weather_not_a_list_raises(self):
        with pytest.raises(MalformedForecastError, match="weather"):
            parse_sample(owm_item(weather=5))


class TestParseForecast:
    def test_full_payload(self):
        payload = {
            "list": [owm_item(), owm_item(dt=1704078000)],
            "city": {
                "id": 2950159,
                "name": "Berlin",
                "country": "DE",
                "coord": {"lat": 52.52, "lon": 13.405},
            },
        }
        response = parse_forecast(payload)

        assert response.location.name == "Berlin"
        assert response.location.lat == 52.52
        assert len(response.samples) == 2
        assert response.snapshot_id == "Berlin-1704067200"

    def test_missing_list_raises(self):
        with pytest.raises(MalformedForecastError, match="list"):
            parse_forecast({"city": {}})

    def test_empty_list(self):
        response = parse_forecast({"list": []})
        assert response.samples == ()
        assert response.snapshot_id == "-None"


class TestModels:
    def test_recommendation_ordering(self):
        assert Recommendation.GOOD > Recommendation.POOR
        assert Recommendation.DANGEROUS < Recommendation.POOR
        assert max(Recommendation) == Recommendation.EXCELLENT

    def test_summary_to_dict_without_condition(self):
        from pedalpace.models.weather import DailySummary, TemperatureSummary

        day = DailySummary(
            timestamp=1,
            temperature=TemperatureSummary(day=10, min=5.0, max=12.0, night=7.0),
            condition=None,
            humidity=60,
            wind_speed=1.0,
            precip_probability=0.1,
        )
        row = summary_to_dict(day)

        assert row["condition_code"] is None
        assert row["temp_night"] == 7.0


class TestParseLocation:
    def test_city_not_an_object_raises(self):
        with pytest.raises(MalformedForecastError, match="city"):
            parse_forecast({"list": [owm_item()], "city": "Berlin"})

    def test_coord_not_an_object_raises(self):
        payload = {"list": [owm_item()], "city": {"name": "Berlin", "coord": [1, 2]}}
        with pytest.raises(MalformedForecastError, match="city.coord"):
            parse_forecast(payload)

    def test_infinite_latitude_raises(self):
        payload = {
            "list": [],
            "city": {"name": "Berlin", "coord": {"lat": float("inf"), "lon": 13.4}},
        }
        with pytest.raises(MalformedForecastError, match="city.coord.lat"):
            parse_forecast(payload)

    def test_missing_city_uses_defaults(self):
        response = parse_forecast({"list": []})
        assert response.location.name == ""
        assert response.location.lat == 0.0
