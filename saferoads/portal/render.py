"""HTML fragments for the portal, rendered with Jinja2."""
import os
from datetime import date

from jinja2 import Environment, FileSystemLoader, select_autoescape

from saferoads.services.assessment import severity_for

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

SEVERITY_GRADIENTS = {
    "Critical": "linear-gradient(90deg, #EF4444, #DC2626)",
    "Moderate": "linear-gradient(90deg, #F59E0B, #D97706)",
    "Minor": "linear-gradient(90deg, #10B981, #059669)",
}
SEVERITY_COLORS = {"Critical": "red", "Moderate": "yellow", "Minor": "green"}


def format_currency(amount: int) -> str:
    """Amount without the rupee sign: lakhs as ``25.0L``, smaller sums digit-grouped."""
    if amount >= 100000:
        return f"{amount / 100000:.1f}L"
    return f"{amount:,}"


def format_date(value: str) -> str:
    d = date.fromisoformat(value)
    return f"{d.day} {d:%b %Y}"


def severity_class(score: int) -> str:
    return f"severity-{severity_for(score).lower()}"


def severity_gradient(score: int) -> str:
    return SEVERITY_GRADIENTS[severity_for(score)]


env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
env.filters.update(
    currency=format_currency,
    date=format_date,
    severity_class=severity_class,
    severity_gradient=severity_gradient,
    first_word=lambda s: s.split(" ")[0],
)


def _render(name: str, **context) -> str:
    return env.get_template(f"portal/{name}").render(**context)


def render_result(assessment) -> str:
    return _render(
        "result.html",
        result=assessment,
        color=SEVERITY_COLORS.get(assessment.severity, "green"),
        gradient=SEVERITY_GRADIENTS.get(assessment.severity, SEVERITY_GRADIENTS["Minor"]),
    )


def render_escalation(escalation) -> str:
    return _render("escalation.html", escalation=escalation)


def render_priority_table(reports) -> str:
    return _render("priority_table.html", reports=reports)


def render_projects(projects) -> str:
    return _render("projects.html", projects=projects)


def render_emergency(services) -> str:
    return _render("emergency.html", services=services)


def render_notifications(notifications) -> str:
    return _render("notifications.html", notifications=notifications)


def render_weather_alert(weather, level: dict, low: bool) -> str:
    return _render("weather_alert.html", weather=weather, level=level, low=low)


def render_portal(state) -> str:
    return _render("index.html", state=state)
