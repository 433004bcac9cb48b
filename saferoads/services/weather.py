"""Visibility monitoring on top of the OpenWeatherMap current-weather API."""
import logging
import random
from datetime import datetime

import httpx

from saferoads.config import is_configured, settings
from saferoads.schemas.places import Weather
from saferoads.services.geo import http_client
from saferoads.utils.exceptions import UpstreamError, mask_secrets

logger = logging.getLogger(__name__)

SIMULATED_SCENARIOS = [
    {"visibility": 0.5, "weather": "Fog", "description": "Dense fog", "temperature": 18},
    {"visibility": 0.8, "weather": "Mist", "description": "Light mist", "temperature": 20},
    {"visibility": 5, "weather": "Clear", "description": "Clear sky", "temperature": 25},
    {"visibility": 8, "weather": "Clouds", "description": "Few clouds", "temperature": 22},
    {"visibility": 10, "weather": "Clear", "description": "Clear sky", "temperature": 28},
]

# (upper bound in km, level, color, advice)
VISIBILITY_LEVELS = [
    (0.5, "Critical", "red", "Avoid driving"),
    (1, "Very Low", "orange", "Drive with extreme caution"),
    (2, "Low", "yellow", "Reduce speed"),
    (5, "Moderate", "blue", "Drive carefully"),
]


def _now() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def visibility_level(visibility_km: float) -> dict:
    for bound, level, color, action in VISIBILITY_LEVELS:
        if visibility_km < bound:
            return {"level": level, "color": color, "action": action}
    return {"level": "Good", "color": "green", "action": "Normal driving conditions"}


def is_low_visibility(visibility_km: float, threshold: float | None = None) -> bool:
    if threshold is None:
        threshold = settings.visibility_threshold
    return visibility_km < threshold


def simulate_weather(rng: random.Random | None = None) -> Weather:
    rng = rng or random
    scenario = rng.choice(SIMULATED_SCENARIOS)
    return Weather(
        **scenario,
        humidity=65 + rng.randint(0, 19),
        wind_speed=5 + rng.random() * 10,
        timestamp=_now(),
    )


def weather_from_openweather(data: dict) -> Weather:
    return Weather(
        visibility=data["visibility"] / 1000,
        weather=data["weather"][0]["main"],
        description=data["weather"][0]["description"],
        temperature=data["main"]["temp"],
        humidity=data["main"]["humidity"],
        wind_speed=data["wind"]["speed"],
        timestamp=_now(),
    )


async def fetch_weather(lat: float, lng: float) -> Weather:
    params = {"lat": lat, "lon": lng, "appid": settings.openweather_api_key, "units": "metric"}
    try:
        async with http_client() as client:
            response = await client.get(settings.openweather_weather_url, params=params)
            response.raise_for_status()
            return weather_from_openweather(response.json())
    except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
        raise UpstreamError(mask_secrets(str(e))) from e


async def check_weather(lat: float, lng: float) -> Weather:
    """Current weather for a location, simulated when the API is unconfigured or failing."""
    if not is_configured(settings.openweather_api_key):
        logger.warning("OpenWeatherMap API key not configured. Using simulation mode.")
        return simulate_weather()
    try:
        return await fetch_weather(lat, lng)
    except UpstreamError as e:
        logger.warning("OpenWeatherMap API error (%s), using simulation mode", e)
        return simulate_weather()
