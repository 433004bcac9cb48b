"""Nearby emergency services (OpenStreetMap Overpass) and air quality (OpenWeatherMap)."""
import logging
import random
import time

import httpx

from saferoads.config import is_configured, settings
from saferoads.schemas.places import EmergencyService
from saferoads.utils.exceptions import UpstreamError, mask_secrets

logger = logging.getLogger(__name__)

EMERGENCY_AMENITIES = ("hospital", "police", "fire_station")

OVERPASS_QUERY = """\
[out:json];
node["amenity"~"{amenities}"](around:{radius},{lat},{lon});
out;
"""


def http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.upstream_timeout)


def build_overpass_query(lat: float, lon: float, radius: int | None = None) -> str:
    return OVERPASS_QUERY.format(
        amenities="|".join(EMERGENCY_AMENITIES),
        radius=radius if radius is not None else settings.emergency_radius,
        lat=lat,
        lon=lon,
    )


def services_from_overpass(data: dict) -> list[EmergencyService]:
    services = []
    for element in data.get("elements", []):
        tags = element.get("tags") or {}
        services.append(EmergencyService(
            name=tags.get("name") or "Emergency Service",
            type=tags.get("amenity") or "unknown",
        ))
    return services


async def find_emergency_services(lat: float, lon: float, radius: int | None = None) -> list[EmergencyService]:
    query = build_overpass_query(lat, lon, radius)
    try:
        async with http_client() as client:
            response = await client.post(settings.overpass_url, content=query)
            response.raise_for_status()
            services = services_from_overpass(response.json())
    # pydantic's ValidationError is a ValueError
    except (httpx.HTTPError, ValueError, AttributeError, TypeError) as e:
        logger.error("Overpass lookup failed for %s,%s: %s", lat, lon, e)
        raise UpstreamError("Emergency lookup failed") from e

    logger.info("Overpass returned %d emergency services near %s,%s", len(services), lat, lon)
    return services


def simulate_air_quality(lat: float, lon: float, rng: random.Random | None = None) -> dict:
    """Offline stand-in shaped like the OpenWeatherMap air_pollution payload."""
    rng = rng or random
    return {
        "coord": {"lon": lon, "lat": lat},
        "list": [{
            "main": {"aqi": rng.randint(1, 5)},
            "components": {
                "co": round(rng.uniform(200, 900), 2),
                "no2": round(rng.uniform(5, 60), 2),
                "o3": round(rng.uniform(10, 120), 2),
                "pm2_5": round(rng.uniform(5, 150), 2),
                "pm10": round(rng.uniform(10, 200), 2),
            },
            "dt": int(time.time()),
        }],
    }


async def fetch_air_quality(lat: float, lon: float) -> dict:
    """Return the upstream air_pollution payload untouched."""
    if not is_configured(settings.openweather_api_key):
        logger.warning("OpenWeatherMap API key not configured. Using simulation mode.")
        return simulate_air_quality(lat, lon)

    params = {"lat": lat, "lon": lon, "appid": settings.openweather_api_key}
    try:
        async with http_client() as client:
            response = await client.get(settings.openweather_air_url, params=params)
            response.raise_for_status()
            return response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Air quality fetch failed: %s", mask_secrets(str(e)))
        raise UpstreamError("Weather fetch failed") from e
