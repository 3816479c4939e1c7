import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.errors import AppError, ValidationError
from api.models.responses.error import ErrorBody, ErrorResponse
from config.env import settings

logger = logging.getLogger(__name__)

INTERNAL_ERROR_CODE = "INTERNAL_SERVER_ERROR"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"

# Request locations FastAPI prefixes onto validation error paths
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}

_HTTP_ERROR_CODES = {
    401: "UNAUTHORIZED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _error_body(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    envelope = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    return envelope.model_dump(exclude_none=True)


def _json_error(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=_error_body(code, message, details))


def _field_path(loc: Iterable[Any], strip_request_location: bool) -> str:
    parts = list(loc)
    if strip_request_location and parts and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(str(part) for part in parts)


def _collect_errors(errors: Iterable[Dict[str, Any]], strip_request_location: bool = False) -> Tuple[str, Dict[str, str]]:
    """Flatten pydantic error dicts into (first message, {dotted.path: message})."""
    first_message = None
    details: Dict[str, str] = {}
    for err in errors:
        message = str(err.get("msg", "Invalid value"))
        if first_message is None:
            first_message = message
        path = _field_path(err.get("loc", ()), strip_request_location)
        details.setdefault(path, message)
    return first_message or "Validation failed", details


def handle_api_error(error: object) -> JSONResponse:
    """Translate any raised value into the uniform JSON error envelope.

    Accepts anything, including ``None`` and non-exception objects. Messages of
    unexpected errors are never exposed to the caller.
    """
    if settings.environment != "test":
        if isinstance(error, (AppError, PydanticValidationError, RequestValidationError, StarletteHTTPException)):
            logger.error(f"API error: {error!r}")
        elif isinstance(error, BaseException):
            logger.error("Unhandled API error", exc_info=error)
        else:
            logger.error(f"Unhandled API error value: {error!r}")

    if isinstance(error, RequestValidationError):
        errors = list(error.errors())
        if any(err.get("type") == "json_invalid" for err in errors):
            return _json_error(422, "UNPROCESSABLE_ENTITY", "Invalid JSON format")
        message, details = _collect_errors(errors, strip_request_location=True)
        return _json_error(400, ValidationError.code, message, details)

    if isinstance(error, PydanticValidationError):
        message, details = _collect_errors(error.errors())
        return _json_error(400, ValidationError.code, message, details)

    if isinstance(error, ValidationError):
        return _json_error(error.status_code, error.code, error.message, error.details)

    if isinstance(error, AppError) and type(error) is not AppError:
        return _json_error(error.status_code, error.code, error.message)

    if isinstance(error, StarletteHTTPException) and error.status_code < 500:
        code = _HTTP_ERROR_CODES.get(error.status_code, "HTTP_ERROR")
        return _json_error(error.status_code, code, str(error.detail))

    return _json_error(500, INTERNAL_ERROR_CODE, INTERNAL_ERROR_MESSAGE)


async def _exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return handle_api_error(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Route every error raised by the API through handle_api_error."""
    app.add_exception_handler(AppError, _exception_handler)
    app.add_exception_handler(RequestValidationError, _exception_handler)
    app.add_exception_handler(PydanticValidationError, _exception_handler)
    app.add_exception_handler(StarletteHTTPException, _exception_handler)
    app.add_exception_handler(Exception, _exception_handler)
