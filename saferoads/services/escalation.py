import time
from dataclasses import dataclass

from saferoads.config import settings

LOCATION_UNAVAILABLE = "Location unavailable"
PRIORITY = "Priority"
PENDING = "Pending"


@dataclass(frozen=True)
class Escalation:
    report_id: str
    location: str
    score: int


def should_escalate(score: int, threshold: int | None = None) -> bool:
    if threshold is None:
        threshold = settings.damage_threshold
    return score > threshold


def status_for(score: int, threshold: int | None = None) -> str:
    return PRIORITY if should_escalate(score, threshold) else PENDING


def display_report_id(now: float | None = None) -> str:
    """Last six digits of the epoch milliseconds.

    Shown to the citizen after escalation only; it is not stored and not unique.
    """
    if now is None:
        now = time.time()
    return "#" + str(round(now * 1000))[-6:]


def location_label(location: tuple[float, float] | None, missing: str = LOCATION_UNAVAILABLE) -> str:
    if location is None:
        return missing
    lat, lng = location
    return f"{lat:.4f}, {lng:.4f}"


def escalate(score: int, location: tuple[float, float] | None, now: float | None = None) -> Escalation:
    return Escalation(
        report_id=display_report_id(now),
        location=location_label(location),
        score=score,
    )
