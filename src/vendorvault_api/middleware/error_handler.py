"""Global error handlers producing {"error": ...} bodies without leaking internals."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from vendorvault_api.config import get_settings
from vendorvault_api.exceptions import VendorVaultError

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 60

SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict with existing resource",
    413: "File too large",
    429: "Too many requests",
    500: "Internal server error",
}


def _get_cors_headers(request: Request) -> dict[str, str]:
    """Get CORS headers for error responses.

    Exception handlers run outside the CORS middleware, so allowed origins
    must be echoed here for browsers to read the error body.

    Args:
        request: The incoming request

    Returns:
        Dict of CORS headers to add to the response
    """
    origin = request.headers.get("origin")
    if not origin:
        return {}

    if origin in get_settings().cors_origins_list:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }
    return {}


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"error": message}
    if details:
        content.update(details)
    return JSONResponse(status_code=status_code, content=content, headers=_get_cors_headers(request))


def _validation_fields(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Reduce pydantic errors to field name and message."""
    fields = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append(
            {
                "field": ".".join(loc) or "body",
                "message": str(error.get("msg", "Invalid value")),
            }
        )
    return fields


async def vendorvault_exception_handler(request: Request, exc: VendorVaultError) -> JSONResponse:
    """Handle domain exceptions raised by services.

    Args:
        request: FastAPI request
        exc: Domain exception

    Returns:
        JSONResponse with the exception's status and message
    """
    if exc.status_code >= 500:
        logger.error(f"Service error for {request.url.path}: {exc.message}")
    return _error_response(request, exc.status_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions.

    Args:
        request: FastAPI request
        exc: HTTP exception

    Returns:
        JSONResponse with the detail as error message
    """
    if isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = SAFE_ERROR_MESSAGES.get(exc.status_code, "Request failed")
    return _error_response(request, exc.status_code, message)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors as 400 with the offending fields.

    Args:
        request: FastAPI request
        exc: Validation exception

    Returns:
        JSONResponse listing invalid fields
    """
    fields = _validation_fields(list(exc.errors()))
    logger.warning(f"Validation error for {request.url.path}: {fields}")
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "Invalid input data",
        {"fields": fields},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy exceptions without leaking database details.

    Args:
        request: FastAPI request
        exc: SQLAlchemy exception

    Returns:
        JSONResponse with safe error
    """
    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error for {request.url.path}: {exc.orig}")
        return _error_response(request, status.HTTP_409_CONFLICT, "Resource already exists")

    logger.error(f"Database error for {request.url.path}: {exc}", exc_info=True)
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error occurred"
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information.

    Args:
        request: FastAPI request
        exc: Unexpected exception

    Returns:
        JSONResponse with generic error
    """
    logger.error(f"Unhandled exception for {request.url.path}: {exc}", exc_info=True)

    if get_settings().debug:
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            SAFE_ERROR_MESSAGES[500],
            {"type": type(exc).__name__, "message": str(exc)},
        )
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, SAFE_ERROR_MESSAGES[500])


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Reject a throttled request with an RFC 7807 problem body and Retry-After."""
    logger.warning(f"Rate limit exceeded for {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "type": "https://datatracker.ietf.org/doc/html/rfc6585#section-4",
            "title": SAFE_ERROR_MESSAGES[429],
            "status": status.HTTP_429_TOO_MANY_REQUESTS,
            "detail": f"Rate limit exceeded: {exc.detail}",
            "instance": request.url.path,
        },
        media_type="application/problem+json",
        headers={"Retry-After": str(RETRY_AFTER_SECONDS), **_get_cors_headers(request)},
    )
