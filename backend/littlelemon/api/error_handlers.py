"""Error Handlers: map menu cache failures onto HTTP responses.

Invariants:
    - Every error body is {"error": {code, message, category, severity, ...}}
    - MenuCacheError keeps its own status; a retryable one sets Retry-After
    - Log level follows the error's severity (a request before startup is a warning,
      not a page)
    - Invalid query parameters (search, category) -> 400 naming the parameter
    - Anything else -> 500 without internal details

Design Decisions:
    - Handlers are plain coroutines registered with add_exception_handler, so
      tests can call them without an app
    - sync failures never reach this module: the orchestrator reports them in
      the /sync body, so the domain handler only sees runtime and store errors
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from littlelemon.core.errors import ErrorCategory, ErrorSeverity, MenuCacheError

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    **fields,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **fields,
        },
    }


async def menu_cache_error_handler(
    request: Request, exc: MenuCacheError,
) -> JSONResponse:
    logger.log(
        _LOG_LEVELS[exc.severity],
        f"{exc.code} on {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "sync_id": exc.context.sync_id,
        },
    )
    headers = None
    if exc.retry_after is not None:
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


async def query_validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    # loc is ("query", "<param>") for every route in this API
    params = [
        {"param": str(e["loc"][-1]), "message": e["msg"], "type": e["type"]}
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected query on {request.url.path}: "
        f"{', '.join(p['param'] for p in params)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid query parameter",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING,
            details=params,
        ),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MenuCacheError, menu_cache_error_handler)
    app.add_exception_handler(RequestValidationError, query_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
