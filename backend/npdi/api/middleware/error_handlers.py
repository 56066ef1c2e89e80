"""Map domain errors, bad requests and crashes onto the API error envelope"""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from ...domain.errors import DomainError
from ...utils.logger import get_logger, get_correlation_id
from .correlation import CORRELATION_HEADER

logger = get_logger(__name__)


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None
) -> JSONResponse:
    """The {"error": {...}} body shared with DomainError.to_dict, tagged with the request's correlation id"""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, "details": details or {}}},
        headers={CORRELATION_HEADER: get_correlation_id() or ""}
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Request errors without the raw exception objects pydantic may attach"""
    return [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


async def on_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    logger.warning(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc.http_status, exc.error_code, exc.message, exc.details)


async def on_bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_errors(exc)
    logger.warning(f"Rejected {request.method} {request.url.path}: {errors}")
    return error_response(
        status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Request validation failed", {"errors": errors}
    )


async def on_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "An unexpected error occurred"
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, on_domain_error)
    app.add_exception_handler(RequestValidationError, on_bad_request)
    app.add_exception_handler(Exception, on_unexpected_error)
