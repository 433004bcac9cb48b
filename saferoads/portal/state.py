"""Application state of the citizen/authority portal.

All mutation goes through the named operations on PortalState; rendering
functions only read from it.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

from saferoads.config import settings
from saferoads.portal import render
from saferoads.services.escalation import PRIORITY, should_escalate
from saferoads.services.geo import find_emergency_services
from saferoads.utils.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    CITIZEN = "citizen"
    AUTHORITY = "authority"


ROOT_CONTAINERS = {
    Mode.CITIZEN: "citizenPortal",
    Mode.AUTHORITY: "authorityPortal",
}

SECTIONS = ("home", "report", "emergency", "tenders", "weather")


def section_container(name: str) -> str:
    return f"{name}Section"


@dataclass
class PortalReport:
    type: str
    location: str
    severity: int
    status: str
    date: str
    lat: float = 0.0
    lng: float = 0.0
    distance: float | None = None
    id: int = 0


@dataclass
class Project:
    id: int
    name: str
    budget: int
    contractor: str
    materials: int
    labor: int
    progress: int
    completion: str
    area: str
    status: str


@dataclass
class Notification:
    message: str
    kind: str = "info"


PlacesLookup = Callable[[float, float], Awaitable[list]]


@dataclass
class PortalState:
    mode: Mode = Mode.CITIZEN
    section: str | None = None
    user_location: tuple[float, float] | None = None
    reports: list[PortalReport] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)
    visible: set[str] = field(default_factory=lambda: {ROOT_CONTAINERS[Mode.CITIZEN]})
    views: dict[str, str] = field(default_factory=dict)

    def is_visible(self, container: str) -> bool:
        return container in self.visible

    def notify(self, message: str, kind: str = "info") -> Notification:
        notification = Notification(message, kind)
        self.notifications.append(notification)
        return notification

    def drain_notifications(self) -> list[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    def set_location(self, lat: float, lng: float) -> None:
        self.user_location = (lat, lng)
        logger.info("Location acquired: %s", self.user_location)

    def use_default_location(self) -> None:
        logger.warning("Location unavailable, using default coordinate")
        self.user_location = (settings.default_lat, settings.default_lng)

    def add_report(self, report: PortalReport) -> PortalReport:
        """Number the report after the current list and put it first (newest first)."""
        report.id = len(self.reports) + 1
        self.reports.insert(0, report)
        self.notify("Report submitted successfully!", "success")
        return report

    def priority_reports(self) -> list[PortalReport]:
        return [r for r in self.reports if r.status == PRIORITY or should_escalate(r.severity)]

    def switch_mode(self, mode: Mode | str) -> None:
        mode = Mode(mode)
        self.mode = mode
        for root in ROOT_CONTAINERS.values():
            self.visible.discard(root)
        self.visible.add(ROOT_CONTAINERS[mode])
        if mode is Mode.AUTHORITY:
            self.views["priority"] = render.render_priority_table(self.priority_reports())

    async def show_section(self, name: str, places: PlacesLookup | None = None) -> bool:
        """Show one citizen section and hide the rest; unknown names are ignored."""
        if name not in SECTIONS:
            logger.info("Ignoring unknown section %r", name)
            return False

        for section in SECTIONS:
            self.visible.discard(section_container(section))
        self.visible.add(section_container(name))
        self.section = name

        if name == "emergency":
            await self._load_emergency_services(places or find_emergency_services)
        elif name == "tenders":
            self.filter_projects("")
        return True

    def filter_projects(self, term: str) -> list[Project]:
        term = (term or "").lower()
        filtered = [
            p for p in self.projects
            if term in p.name.lower() or term in p.area.lower() or term in p.contractor.lower()
        ]
        self.views["tenders"] = render.render_projects(filtered)
        return filtered

    def show_weather(self, html: str) -> None:
        self.views["weather"] = html

    async def _load_emergency_services(self, places: PlacesLookup) -> None:
        if self.user_location is None:
            self.use_default_location()
        lat, lng = self.user_location
        try:
            services = await places(lat, lng)
        except UpstreamError as e:
            logger.warning("Emergency lookup failed: %s", e)
            self.notify("Could not load nearby emergency services", "error")
            services = []
        self.views["emergency"] = render.render_emergency(services)
