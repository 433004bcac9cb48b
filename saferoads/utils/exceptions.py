import logging
import re

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from saferoads.utils.response import error_response

logger = logging.getLogger(__name__)

_SECRET_PATTERNS = [
    re.compile(r"AIza[0-9A-Za-z_-]+"),
    re.compile(r"sk-[A-Za-z0-9_-]+"),
    re.compile(r"appid=[0-9a-fA-F]+"),
]


class AppException(Exception):
    """Raised by route handlers; always rendered as ``{"error": message}``."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class IntakeError(Exception):
    pass


class AssessmentError(Exception):
    pass


class AssessmentParseError(AssessmentError):
    pass


class UpstreamError(Exception):
    pass


def mask_secrets(text: str) -> str:
    """Strip API keys from error text before it is logged or stored."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub("***", text)
    return text


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Invalid request on %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=500,
            content=error_response("Invalid request"),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )
