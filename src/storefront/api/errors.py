"""HTTP mapping for storefront errors.

Protean's own exception handlers cover ``ValidationError`` (400); the
storefront families map onto 404, 409 and 422 with an ``{"error": ...}``
body. A version conflict raised when a command's unit of work commits is
reported as a retryable ``ConcurrentUpdate`` (409).
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from storefront.errors import ConcurrentUpdate, ConflictError, NotFoundError, StateError, StorefrontError

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    NotFoundError: 404,
    ConflictError: 409,
    StateError: 422,
}


def status_code_for(exc: StorefrontError) -> int:
    for family, status_code in STATUS_CODES.items():
        if isinstance(exc, family):
            return status_code
    return 400


def error_body(exc: StorefrontError) -> dict:
    body = {"error": exc.message}
    if exc.retryable:
        body["retryable"] = True
    return body


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info(
        "Request refused",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content=error_body(exc))


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent update rejected", path=request.url.path, detail=str(exc))
    return await storefront_error_handler(request, ConcurrentUpdate())


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
