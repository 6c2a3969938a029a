"""Exception handlers for the FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from talent_radar.core.exceptions import (
    InvalidRequestError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    TalentRadarError,
)

logger = logging.getLogger(__name__)


def status_code_for(exc: TalentRadarError) -> int:
    """Map a domain exception to the HTTP status code it is reported with."""
    if isinstance(exc, InvalidRequestError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InvalidStateError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, PermissionDeniedError):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def talent_radar_exception_handler(request: Request, exc: TalentRadarError) -> JSONResponse:
    """
    Handle all Talent Radar domain exceptions and convert them to HTTP responses.

    Args:
        request: The incoming request
        exc: The exception that was raised

    Returns:
        JSONResponse with the mapped status code and error details
    """
    status_code = status_code_for(exc)
    if isinstance(exc, StorageError) or status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        # Storage details stay in the logs
        detail = "Internal server error"
    else:
        logger.debug("%s %s rejected: %s", request.method, request.url.path, exc.message)
        detail = exc.message

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "error": exc.__class__.__name__,
            **({"info": exc.details} if exc.details else {}),
        },
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies and parameters as 400 validation errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": jsonable_encoder(exc.errors()),
            "error": InvalidRequestError.__name__,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers with the FastAPI app."""
    app.add_exception_handler(TalentRadarError, talent_radar_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, request_validation_exception_handler  # type: ignore[arg-type]
    )
