"""
Exception handlers turning every failure into a structured JSON error.

Bodies always have the shape ``{"success": false, "error": kind, "message": text}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import ExamServiceError, InvalidInput, ServerFault

logger = logging.getLogger(__name__)

_HTTP_KINDS = {
    400: "InvalidInput",
    404: "NotFound",
    405: "MethodNotAllowed",
    409: "InvalidState",
    413: "PayloadTooLarge",
    422: "InvalidInput",
    429: "RateLimited",
}


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request body"


def error_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, ExamServiceError):
        error = exc
    elif isinstance(exc, RequestValidationError):
        error = InvalidInput(_describe_validation(exc))
    elif isinstance(exc, StarletteHTTPException):
        status_code = exc.status_code
        kind = _HTTP_KINDS.get(
            status_code, "ServerFault" if status_code >= 500 else "HTTPError"
        )
        return JSONResponse(
            {"success": False, "error": kind, "message": str(exc.detail)},
            status_code=status_code,
            headers=getattr(exc, "headers", None),
        )
    else:
        logger.exception(
            f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}"
        )
        error = ServerFault()

    if error.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {error.message}")
    else:
        logger.info(
            f"{request.method} {request.url.path} rejected ({error.kind}): {error.message}"
        )
    return JSONResponse(error.to_dict(), status_code=error.status_code)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ExamServiceError, error_handler)
    app.add_exception_handler(RequestValidationError, error_handler)
    app.add_exception_handler(StarletteHTTPException, error_handler)
    app.add_exception_handler(Exception, error_handler)
