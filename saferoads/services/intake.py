"""Check uploaded files and turn them into base64 payloads for the model."""
import base64
import logging

from saferoads.config import settings
from saferoads.utils.exceptions import IntakeError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/png", "image/jpg", "video/mp4"})

INVALID_TYPE_MESSAGE = "Please upload a valid image (JPG, PNG) or video (MP4)"
TOO_LARGE_MESSAGE = "File size must be less than 10MB"


def mime_type_for(content_type: str) -> str:
    # browsers send image/jpg for some .jpg files
    return "image/jpeg" if content_type == "image/jpg" else content_type


def validation_error(content_type: str | None, size: int | None) -> str | None:
    """Return the user-facing rejection message, or None if the file is acceptable."""
    if content_type not in ALLOWED_CONTENT_TYPES:
        return INVALID_TYPE_MESSAGE
    if size is not None and size > settings.max_upload_size_bytes:
        return TOO_LARGE_MESSAGE
    return None


def validate(file) -> bool:
    """Accept any file-like descriptor exposing ``content_type`` (or ``type``) and ``size``."""
    content_type = getattr(file, "content_type", None) or getattr(file, "type", None)
    size = getattr(file, "size", None)
    message = validation_error(content_type, size)
    if message:
        logger.info("Rejected upload type=%s size=%s: %s", content_type, size, message)
        return False
    return True


async def read_as_base64(upload) -> str:
    """Read an upload once and return its base64 body (no data-URL prefix)."""
    try:
        content = await upload.read()
    except Exception as e:
        logger.exception("Failed to read upload %s", getattr(upload, "filename", None))
        raise IntakeError(f"Could not read file: {e}") from e
    return base64.b64encode(content).decode("utf-8")
