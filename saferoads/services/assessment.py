"""Road damage assessment shared by the /scan endpoint and the portal upload flow.

The /scan endpoint runs in strict mode: an upstream or parse failure is an error.
The portal runs with ``fallback=True`` and quietly swaps in the simulator.
Both modes use the simulator when no Gemini key is configured.
"""
import json
import logging
import random
import re

from saferoads.config import is_configured, settings
from saferoads.schemas.assessment import Assessment
from saferoads.utils.exceptions import AssessmentError, AssessmentParseError, mask_secrets

logger = logging.getLogger(__name__)

PROMPT = """\
Analyze this road image for damage. Identify potholes, cracks, flooding, or any road hazards. \
Return ONLY a JSON object with these fields:
{
    "damage_score": <number 0-100>,
    "damage_type": "<type of damage>",
    "severity": "<Critical/Moderate/Minor>",
    "description": "<brief description>",
    "recommended_action": "<what should be done>"
}
"""

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

# (lower bound, damage type, description, recommended action); first bound the score exceeds wins
DAMAGE_BUCKETS: list[tuple[int, str, str, str]] = [
    (
        80,
        "Severe Pothole/Crack",
        "Critical road damage detected requiring immediate attention",
        "Immediate repair and traffic diversion recommended",
    ),
    (
        60,
        "Moderate Road Wear",
        "Significant road damage that needs scheduled repair",
        "Schedule repair within 1-2 weeks",
    ),
    (
        30,
        "Minor Surface Damage",
        "Minor cracks or wear visible on road surface",
        "Monitor and schedule routine maintenance",
    ),
]
GOOD_CONDITION = (
    "Good Condition",
    "Road surface is in acceptable condition",
    "No immediate action required",
)

SEVERITIES = ("Critical", "Moderate", "Minor")


def severity_for(score: int) -> str:
    if score > 75:
        return "Critical"
    if score > 50:
        return "Moderate"
    return "Minor"


def simulate_fields(score: int) -> Assessment:
    """Simulator policy: map a score onto the fixed damage buckets."""
    damage_type, description, action = GOOD_CONDITION
    for bound, bucket_type, bucket_description, bucket_action in DAMAGE_BUCKETS:
        if score > bound:
            damage_type, description, action = bucket_type, bucket_description, bucket_action
            break

    return Assessment(
        damage_score=score,
        damage_type=damage_type,
        severity=severity_for(score),
        description=description,
        recommended_action=action,
    )


def simulate(rng: random.Random | None = None) -> Assessment:
    score = (rng or random).randint(0, 100)
    return simulate_fields(score)


def extract_json(text: str) -> dict:
    """Decode the JSON object embedded in a free-text model reply.

    Matches greedily from the first ``{`` to the last ``}``, so markdown fences
    and chatter around the object are ignored.
    """
    match = _JSON_OBJECT.search(text or "")
    if match is None:
        raise AssessmentParseError("No JSON object in model response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AssessmentParseError(f"Malformed JSON in model response: {e}") from e
    if not isinstance(parsed, dict):
        raise AssessmentParseError("Model response JSON is not an object")
    return parsed


def assessment_from_reply(data: dict) -> Assessment:
    """Build an Assessment from decoded model output.

    ``damage_score`` is required. Missing text fields are taken from the simulator
    bucket for that score; the score itself is never range-checked.
    """
    try:
        score = int(data["damage_score"])
    except (KeyError, TypeError, ValueError) as e:
        raise AssessmentParseError(f"Invalid damage_score in model response: {data!r}") from e

    defaults = simulate_fields(score)
    severity = data.get("severity")
    if severity not in SEVERITIES:
        severity = defaults.severity

    return Assessment(
        damage_score=score,
        damage_type=str(data.get("damage_type") or defaults.damage_type),
        severity=severity,
        description=str(data.get("description") or defaults.description),
        recommended_action=str(data.get("recommended_action") or defaults.recommended_action),
    )


def _build_content(image_b64: str, mime_type: str) -> list[dict]:
    return [
        {"type": "text", "text": PROMPT},
        {
            "type": "image_url",
            "image_url": {"url": f"data:{mime_type};base64,{image_b64}"},
        },
    ]


async def _request_completion(image_b64: str, mime_type: str) -> str:
    """Send the image to Gemini through its OpenAI-compatible endpoint and return the reply text."""
    from openai import AsyncOpenAI

    model = settings.gemini_model
    logger.info("Calling Gemini model=%s (%d base64 chars)", model, len(image_b64))

    async with AsyncOpenAI(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        timeout=settings.upstream_timeout,
        max_retries=0,
    ) as client:
        response = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": _build_content(image_b64, mime_type)}],
            temperature=0.4,
            max_tokens=500,
        )

    raw_text = response.choices[0].message.content or ""
    logger.info("Gemini raw response (%d chars): %s", len(raw_text), raw_text[:500])
    return raw_text


async def assess(image_b64: str, *, mime_type: str = "image/jpeg", fallback: bool = False) -> Assessment:
    if not is_configured(settings.gemini_api_key):
        logger.warning("Gemini API key not configured. Using simulation mode.")
        return simulate()

    try:
        raw_text = await _request_completion(image_b64, mime_type)
        assessment = assessment_from_reply(extract_json(raw_text))
    except Exception as e:
        error_msg = mask_secrets(str(e))
        if not fallback:
            logger.error("Damage assessment failed: %s", error_msg)
            if isinstance(e, AssessmentError):
                raise
            raise AssessmentError(error_msg) from e
        logger.warning("Gemini API error (%s), falling back to simulation mode", error_msg)
        return simulate()

    logger.info(
        "Assessment: score=%d type=%s severity=%s",
        assessment.damage_score, assessment.damage_type, assessment.severity,
    )
    return assessment
