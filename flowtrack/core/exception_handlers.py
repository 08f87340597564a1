"""Dashboard error responses.

Every error leaves the API as {"error": CODE, "message": ..., "details": ...}.
Domain exceptions carry their own code; framework exceptions get a fixed one.
Install with register_exception_handlers(app).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from flowtrack.domain.exceptions import FlowTrackException

logger = logging.getLogger(__name__)

# FlowTrackException.error_code -> HTTP status; unknown codes are client errors
_STATUS_BY_CODE: dict[str, int] = {
    "FLOW_NOT_FOUND": 404,
    "RESOURCE_NOT_FOUND": 404,
    "SERIALIZATION_ERROR": 400,
    "CONFIGURATION_ERROR": 500,
    "STORAGE_FAILURE": 503,
}


def _error_body(
    status_code: int, code: str, message: Any, details: Any = None
) -> JSONResponse:
    content: dict[str, Any] = {"error": code, "message": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _on_flowtrack_error(request: Request, exc: FlowTrackException) -> JSONResponse:
    status_code = _STATUS_BY_CODE.get(exc.error_code, 400)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return _error_body(status_code, exc.error_code, exc.message, exc.details)


def _on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # ctx/input may hold non-JSON values; keep location, message and type only
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return _error_body(422, "VALIDATION_ERROR", "Request validation failed", errors)


def _on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_body(exc.status_code, "HTTP_ERROR", exc.detail)


def _on_unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """Log with traceback; expose the message only in debug mode."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    settings = getattr(request.app.state, "settings", None)
    message = str(exc) if settings is not None and settings.debug else "Internal server error"
    return _error_body(500, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers above on app (most specific first)."""
    app.add_exception_handler(FlowTrackException, _on_flowtrack_error)
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(StarletteHTTPException, _on_http_error)
    app.add_exception_handler(Exception, _on_unhandled_error)
