from fastapi import APIRouter

from saferoads.services.geo import fetch_air_quality, find_emergency_services
from saferoads.utils.exceptions import AppException, UpstreamError

router = APIRouter(tags=["places"])


@router.get("/emergency")
async def emergency(lat: float, lon: float):
    try:
        services = await find_emergency_services(lat, lon)
    except UpstreamError as e:
        raise AppException("Emergency lookup failed") from e
    return [s.model_dump() for s in services]


@router.get("/air")
async def air(lat: float, lon: float):
    try:
        return await fetch_air_quality(lat, lon)
    except UpstreamError as e:
        raise AppException("Weather fetch failed") from e
