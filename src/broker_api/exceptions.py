"""FastAPI exception handlers for converting broker errors to HTTP responses.

The ErrorCode-to-HTTP status mapping follows the broker's error classes:
- 400 Bad Request: caller validation failures and signature mismatches
- 404 Not Found: unknown orders
- 500 Internal Server Error: missing key secret
- 502 Bad Gateway: gateway rejected or failed the request
- 503 Service Unavailable: gateway credentials not configured

Usage:
    from broker_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from broker.models.errors import BrokerError, ErrorClass, ErrorCode
from broker_api.models.common import NotFoundResponse, format_validation_errors

logger = logging.getLogger(__name__)

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    # Caller errors -> 400 Bad Request
    ErrorCode.INVALID_AMOUNT: HTTP_400_BAD_REQUEST,
    ErrorCode.AMOUNT_TOO_SMALL: HTTP_400_BAD_REQUEST,
    ErrorCode.AMOUNT_TOO_LARGE: HTTP_400_BAD_REQUEST,
    ErrorCode.MISSING_PARAMETER: HTTP_400_BAD_REQUEST,
    ErrorCode.SIGNATURE_MISMATCH: HTTP_400_BAD_REQUEST,
    # Not found -> 404
    ErrorCode.ORDER_NOT_FOUND: HTTP_404_NOT_FOUND,
    # Server configuration -> 5xx
    ErrorCode.SERVER_MISCONFIGURED: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.SERVICE_UNAVAILABLE: HTTP_503_SERVICE_UNAVAILABLE,
    # Upstream -> 502
    ErrorCode.GATEWAY_ERROR: HTTP_502_BAD_GATEWAY,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Returns:
        HTTP status code, defaults to 400 if not explicitly mapped.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def broker_error_handler(request: Request, exc: BrokerError) -> JSONResponse:
    """Convert a BrokerError into a ToolError JSON response."""
    status_code = get_http_status_for_error(exc.code)

    if exc.error_class is ErrorClass.CALLER:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    else:
        logger.error(
            "%s %s failed (%s): %s",
            request.method,
            request.url.path,
            exc.error_class.value,
            exc.message,
        )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_tool_error().model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 with field details."""
    response = format_validation_errors(exc.errors())
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=response.model_dump(mode="json"),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Keep the broker response shape for routing errors."""
    if exc.status_code == HTTP_404_NOT_FOUND:
        message = f"Route not found: {request.method} {request.url.path}"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=NotFoundResponse(message=message).model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internal details."""
    logger.exception("Unhandled exception: %s", exc)

    error_response = {
        "success": False,
        "error_code": "ERR_INTERNAL",
        "message": "Internal server error",
        "recovery": "Please try again later or contact support",
        "details": None,
    }

    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(BrokerError, broker_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
