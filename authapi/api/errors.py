"""Exception handlers: classified errors → HTTP responses.

Every error response has the same envelope:

    {"success": false, "error": "<kind>", "message": "<stable message>"}

The message is the class-level public text.  Internal detail (the
``detail`` attribute, chained driver exceptions, tracebacks) goes to the
log and never into the body.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authapi.core.errors import AuthError, ValidationError

logger = logging.getLogger(__name__)


def _envelope(kind: str, message: str, **extra: object) -> dict[str, object]:
    return {"success": False, "error": kind, "message": message, **extra}


async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "%s %s rejected: %s (%s)",
        request.method,
        request.url.path,
        exc.kind,
        exc.detail or "-",
        extra={"error_kind": exc.kind},
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(exc.kind, exc.message),
        headers=headers,
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Field locations and messages only; never echo submitted values back
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())[1:]),
            "message": err.get("msg", "invalid"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=_envelope(ValidationError.kind, ValidationError.message, errors=errors),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope("internal_error", "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, handle_auth_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
