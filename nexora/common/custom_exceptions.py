from typing import Optional
from fastapi import FastAPI, Request,status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException
from nexora.common.constants import request_id_ctx
from nexora.common.logging_setup import get_logger
from nexora.common.utils import build_error, json_error

logger = get_logger("nexora.errors")


class InvalidArgument(ValueError):
    """Out-of-range input, missing required reason or unknown enum value.

    Raised before any field is touched, so the entity is left unchanged.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


async def fallback_handler(request: Request, exc: Exception):

    rid = request_id_ctx.get(None)
    body = {"message": "Internal Server Error"}

    logger.error(
        "unexpected.exception",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=exc,
    )

    status_code = getattr(exc, "status_code", status.HTTP_500_INTERNAL_SERVER_ERROR)
    payload = build_error(code="SERVER_ERROR", details=body, request_id=rid)
    return json_error(payload, status_code=status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = request_id_ctx.get(None)
    logger.warning(
        "request.validation_failed",
        extra={
            "errors": exc.errors(),
            "path": request.url.path,
        },
    )

    payload = build_error(code="UNPROCESSABLE_ENTITY", details={"message":"invalid request"}, request_id=rid)
    return json_error(payload, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):

    rid = request_id_ctx.get(None)
    details = {"message": exc.detail}

    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        # unmatched route rather than a missing record
        details = {"message": "Route not found", "path": request.url.path, "method": request.method}

    payload = build_error(code=f"HTTP_{exc.status_code}", details=details, request_id=rid)
    return json_error(payload, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def invalid_argument_handler(request: Request, exc: InvalidArgument):
    rid = request_id_ctx.get(None)
    logger.warning(
        "request.invalid_argument",
        extra={"field": exc.field, "reason": exc.message, "path": request.url.path},
    )
    payload = build_error(code="INVALID_ARGUMENT", details={"message": exc.message, "field": exc.field}, request_id=rid)
    return json_error(payload, status_code=status.HTTP_400_BAD_REQUEST)


async def stale_data_handler(request: Request, exc: StaleDataError):
    rid = request_id_ctx.get(None)
    logger.warning("seller.persist.conflict", extra={"path": request.url.path, "method": request.method})
    payload = build_error(code="CONCURRENT_UPDATE",
                          details={"message": "Record was modified by another request, reload and retry"},
                          request_id=rid)
    return json_error(payload, status_code=status.HTTP_409_CONFLICT)


def register_all_exceptions(app: FastAPI):

    app.add_exception_handler(
        Exception, # catch all unidentified/unhandled exceptions
        fallback_handler
    )

    app.add_exception_handler(
        RequestValidationError,
        validation_exception_handler
    )

    app.add_exception_handler(
        StarletteHTTPException,  # also covers fastapi's HTTPException and unmatched routes
        http_exception_handler
    )

    app.add_exception_handler(
        InvalidArgument,
        invalid_argument_handler
    )

    app.add_exception_handler(
        StaleDataError,
        stale_data_handler
    )
