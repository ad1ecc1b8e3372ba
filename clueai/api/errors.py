"""
clueai/api/errors.py

``{error}`` responses shared by every Assist endpoint.

The browser client reads ``error`` from any non-2xx body, so request
validation failures are rewritten from FastAPI's default ``{detail: [...]}``
into the same shape (status 400).
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clueai.core.logging import get_logger
from clueai.schemas.assist import ErrorResponse

logger = get_logger(__name__)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        content=ErrorResponse(error=message).model_dump(),
        status_code=status_code,
    )


def _describe(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Registered on the app for ``RequestValidationError``."""
    message = _describe(exc)
    logger.warning("request_validation_failed", path=request.url.path, error=message)
    return error_response(message, status.HTTP_400_BAD_REQUEST)
