"""
Exception handlers translating application errors into JSON responses.

Body shape: {"detail": <message>, "error_code": <code>} plus "errors" with
per-field problems for validation failures.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import AppError, ConfigurationError, UpstreamError
from app.core.logging import get_logger

logger = get_logger(__name__)


def _error_body(message: str, error_code: str, errors=None) -> dict:
    body = {"detail": message, "error_code": error_code}
    if errors is not None:
        body["errors"] = jsonable_encoder(errors)
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    message = exc.message
    if isinstance(exc, ConfigurationError):
        logger.error("configuration_error", error=exc.message)
        message = "Server configuration error"
    elif isinstance(exc, UpstreamError):
        logger.error("upstream_error", error_code=exc.error_code, error=exc.message)
    elif exc.status_code >= 500:
        logger.error("application_error", error_code=exc.error_code, error=exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    errors = exc.details if exc.status_code < 500 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message, exc.error_code, errors),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Invalid request", "VALIDATION_ERROR", exc.errors()),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("An unexpected error occurred", "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
