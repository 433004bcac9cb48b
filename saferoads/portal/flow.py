"""Citizen-side flows: photo submission, road-segment reports, visibility checks."""
import logging
import math
from dataclasses import dataclass
from datetime import date

from saferoads.portal import render
from saferoads.portal.state import PortalReport, PortalState
from saferoads.schemas.assessment import Assessment
from saferoads.services import intake
from saferoads.services.assessment import assess
from saferoads.services.escalation import (
    Escalation,
    escalate,
    location_label,
    should_escalate,
    status_for,
)
from saferoads.services.weather import check_weather, is_low_visibility, visibility_level
from saferoads.utils.exceptions import IntakeError

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0088


@dataclass
class SubmissionResult:
    html: str
    assessment: Assessment | None = None
    escalation: Escalation | None = None


async def submit_photo(state: PortalState, upload) -> SubmissionResult:
    """Validate, assess and (above the threshold) auto-report one uploaded photo.

    Upstream failures never reach the user: the assessment falls back to the
    simulator. Only validation and read errors are reported.
    """
    message = intake.validation_error(upload.content_type, upload.size)
    if message:
        state.notify(message, "error")
        return SubmissionResult(html="")

    try:
        image_b64 = await intake.read_as_base64(upload)
    except IntakeError:
        state.notify("Analysis failed. Please try again.", "error")
        return SubmissionResult(html="")

    assessment = await assess(image_b64, mime_type=intake.mime_type_for(upload.content_type), fallback=True)
    html = render.render_result(assessment)

    escalation = None
    if should_escalate(assessment.damage_score):
        escalation = escalate(assessment.damage_score, state.user_location)
        html += render.render_escalation(escalation)
        lat, lng = state.user_location or (0.0, 0.0)
        state.add_report(PortalReport(
            type=f"AI Detected - {assessment.damage_type}",
            location=location_label(state.user_location, missing="Unknown Location"),
            severity=assessment.damage_score,
            status=status_for(assessment.damage_score),
            date=date.today().isoformat(),
            lat=lat,
            lng=lng,
        ))
        state.notify("Critical damage auto-reported to authorities!", "success")
        logger.info("Auto-reported damage score=%d as %s", assessment.damage_score, escalation.report_id)

    return SubmissionResult(html=html, assessment=assessment, escalation=escalation)


def distance_km(start: tuple[float, float], end: tuple[float, float]) -> float:
    """Great-circle distance between two (lat, lng) points, rounded to 10 m."""
    lat1, lng1 = map(math.radians, start)
    lat2, lng2 = map(math.radians, end)
    a = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return round(2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a)), 2)


def report_road_segment(state: PortalState, start: tuple[float, float], end: tuple[float, float]) -> PortalReport:
    distance = distance_km(start, end)
    report = state.add_report(PortalReport(
        type="Road Segment Repair",
        location=f"{location_label(start)} to {location_label(end)}",
        severity=50,
        status=status_for(50),
        date=date.today().isoformat(),
        distance=distance,
        lat=start[0],
        lng=start[1],
    ))
    state.notify("Road segment reported for repair!", "success")
    return report


async def check_visibility(state: PortalState) -> str:
    if state.user_location is None:
        state.use_default_location()
    lat, lng = state.user_location

    weather = await check_weather(lat, lng)
    low = is_low_visibility(weather.visibility)
    if low:
        logger.info("Low visibility alert: %.2f km", weather.visibility)
        state.notify(
            f"Low visibility detected: {weather.visibility:.2f} km. Drive carefully!",
            "warning",
        )
    html = render.render_weather_alert(weather, visibility_level(weather.visibility), low)
    state.show_weather(html)
    return html
