"""Exception handlers mapping service errors to JSON responses.

Every response body has the shape {"detail": message, "code": CODE}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from gifter.core.structured_logging import build_log_context
from gifter.services.errors import (
    ConflictError,
    GifterServiceError,
    NotFoundOrForbidden,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[GifterServiceError], int] = {
    ValidationError: 400,
    NotFoundOrForbidden: 404,
    ConflictError: 409,
    StoreError: 503,
}


def status_for(exc: GifterServiceError) -> int:
    for error_class in type(exc).__mro__:
        if error_class in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_class]
    return 500


async def service_error_handler(request: Request, exc: GifterServiceError) -> JSONResponse:
    """Convert a GifterServiceError to its JSON response."""
    status_code = status_for(exc)
    logger.info(
        "request_failed code=%s status=%d",
        exc.code,
        status_code,
        extra=build_log_context(route=request.url.path, method=request.method),
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Store failures raised outside atomic() (plain reads, single commits)."""
    logger.exception(
        "store_error",
        extra=build_log_context(route=request.url.path, method=request.method),
    )
    return JSONResponse(
        status_code=503,
        content={"detail": "Storage is unavailable, please try again", "code": StoreError.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GifterServiceError, service_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
