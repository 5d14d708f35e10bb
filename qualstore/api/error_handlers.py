"""Error Handlers — map store, validation and unexpected errors to JSON responses.

Invariants:
    - QualStoreError → its own to_response() body and http_status; reference
      failures carry the offending ids under "details"
    - RequestValidationError → 400 VALIDATION_ERROR with one entry per field
    - Any other exception → 500 INTERNAL_ERROR, message never includes internals
    - Every handled error is logged with the request path and, when known,
      the project and code it concerns

Design Decisions:
    - 4xx domain errors log at WARNING, everything else at ERROR: a dangling
      code id from a client is routine, a failed export is not
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from qualstore.core.errors import ErrorCategory, ErrorSeverity, QualStoreError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QualStoreError, handle_store_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_store_error(request: Request, exc: QualStoreError) -> JSONResponse:
    level = logging.WARNING if exc.http_status < 500 else logging.ERROR
    logger.log(
        level,
        "%s on %s: %s", exc.code, request.url.path, exc.message,
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "project_id": exc.context.project_id or request.path_params.get("project_id"),
            "code_id": exc.context.code_id or request.path_params.get("code_id"),
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        "Rejected request on %s (%d invalid field(s))",
        request.url.path, len(details),
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled %s on %s", type(exc).__name__, request.url.path,
        exc_info=exc,
        extra={
            "error_code": "INTERNAL_ERROR",
            "path": request.url.path,
            "project_id": request.path_params.get("project_id"),
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
