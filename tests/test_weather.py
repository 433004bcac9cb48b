import random

import httpx
import pytest

from saferoads.config import settings
from saferoads.services import weather

CURRENT_WEATHER = {
    "visibility": 800,
    "weather": [{"main": "Mist", "description": "mist"}],
    "main": {"temp": 21.4, "humidity": 88},
    "wind": {"speed": 2.1},
}


def _mock_upstream(monkeypatch, handler):
    monkeypatch.setattr(
        weather, "http_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.mark.parametrize("km,level", [
    (0.2, "Critical"),
    (0.5, "Very Low"),
    (0.99, "Very Low"),
    (1.5, "Low"),
    (4.9, "Moderate"),
    (5, "Good"),
    (10, "Good"),
])
def test_visibility_level(km, level):
    assert weather.visibility_level(km)["level"] == level


def test_is_low_visibility_uses_threshold(monkeypatch):
    monkeypatch.setattr(settings, "visibility_threshold", 2.0)
    assert weather.is_low_visibility(1.9) is True
    assert weather.is_low_visibility(2.0) is False


def test_simulate_weather_picks_known_scenario():
    result = weather.simulate_weather(random.Random(3))
    assert result.visibility in {s["visibility"] for s in weather.SIMULATED_SCENARIOS}
    assert 65 <= result.humidity <= 84


@pytest.mark.asyncio
async def test_check_weather_converts_visibility_to_km(monkeypatch):
    monkeypatch.setattr(settings, "openweather_api_key", "weather-key")
    _mock_upstream(monkeypatch, lambda request: httpx.Response(200, json=CURRENT_WEATHER))

    result = await weather.check_weather(22.5, 88.3)

    assert result.visibility == 0.8
    assert result.weather == "Mist"
    assert result.temperature == 21.4
    assert result.humidity == 88


@pytest.mark.asyncio
async def test_check_weather_falls_back_on_error(monkeypatch):
    monkeypatch.setattr(settings, "openweather_api_key", "weather-key")
    _mock_upstream(monkeypatch, lambda request: httpx.Response(500))

    result = await weather.check_weather(22.5, 88.3)

    assert result.visibility in {s["visibility"] for s in weather.SIMULATED_SCENARIOS}


@pytest.mark.asyncio
async def test_check_weather_falls_back_on_malformed_payload(monkeypatch):
    monkeypatch.setattr(settings, "openweather_api_key", "weather-key")
    _mock_upstream(monkeypatch, lambda request: httpx.Response(200, json={"cod": 200}))

    result = await weather.check_weather(22.5, 88.3)

    assert result.weather in {s["weather"] for s in weather.SIMULATED_SCENARIOS}


@pytest.mark.asyncio
async def test_check_weather_without_key_is_simulated(monkeypatch):
    def _fail(request):
        raise AssertionError("no upstream call expected")

    _mock_upstream(monkeypatch, _fail)
    result = await weather.check_weather(22.5, 88.3)
    assert result.visibility > 0
