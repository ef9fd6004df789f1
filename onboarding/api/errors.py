"""
Exception handlers - map domain errors to HTTP responses.

Every error body has the shape {"detail": <message>, "errors": [<rule>, ...]}.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from onboarding.domain.exceptions import (
    AuthError,
    ConflictError,
    ExpiredError,
    MismatchError,
    NotFoundError,
    OnboardingError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[OnboardingError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ExpiredError: status.HTTP_400_BAD_REQUEST,
    MismatchError: status.HTTP_400_BAD_REQUEST,
    UpstreamError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: OnboardingError) -> int:
    for kind in type(exc).__mro__:
        if kind in STATUS_CODES:
            return STATUS_CODES[kind]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(exc: OnboardingError, status_code: int | None = None) -> JSONResponse:
    code = status_code or status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=code,
        content={"detail": exc.message, "errors": exc.errors},
        headers=headers,
    )


async def onboarding_error_handler(request: Request, exc: OnboardingError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error("Upstream failure on %s %s: %s", request.method, request.url.path, exc)
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report schema failures as 400 with one entry per failing field."""
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        errors.append(f"{location}: {error['msg']}" if location else error["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation error", "errors": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OnboardingError, onboarding_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
