"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from auth.exceptions import AuthorizationGapError, InvalidSharePasswordError
from core.exceptions import (
    InvalidTransitionError,
    PersistenceError,
    QuoteNotFoundError,
    QuoteValidationError,
)

logger = logging.getLogger(__name__)


def _json(status_code: int, code: str, message: str, details: list[str] | None = None, retryable: bool = False):
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, details, retryable).model_dump(mode="json"),
    )


def _pydantic_details(errors: list[dict]) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in errors
    ]


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(QuoteValidationError)
    async def quote_validation_handler(request: Request, exc: QuoteValidationError):
        logger.warning(f"Validation failed on {request.url.path}: {exc}")
        return _json(422, ErrorCodes.VALIDATION_ERROR, "Please fix the highlighted fields", exc.errors)

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        return _json(
            422, ErrorCodes.VALIDATION_ERROR, "Invalid data", _pydantic_details(exc.errors())
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _json(
            422, ErrorCodes.VALIDATION_ERROR, "Invalid request", _pydantic_details(exc.errors())
        )

    @app.exception_handler(QuoteNotFoundError)
    async def not_found_handler(request: Request, exc: QuoteNotFoundError):
        return _json(404, ErrorCodes.NOT_FOUND, str(exc))

    @app.exception_handler(InvalidTransitionError)
    async def transition_handler(request: Request, exc: InvalidTransitionError):
        logger.warning(f"Rejected transition on {request.url.path}: {exc}")
        return _json(409, ErrorCodes.INVALID_STATUS_TRANSITION, str(exc))

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        logger.error(f"Persistence failure on {request.url.path}: {exc}")
        return _json(
            503,
            ErrorCodes.SERVICE_UNAVAILABLE,
            "Could not reach the data store. Your changes were not lost, please try again.",
            retryable=True,
        )

    @app.exception_handler(AuthorizationGapError)
    async def authorization_gap_handler(request: Request, exc: AuthorizationGapError):
        return _json(401, ErrorCodes.NOT_AUTHENTICATED, str(exc))

    @app.exception_handler(InvalidSharePasswordError)
    async def share_password_handler(request: Request, exc: InvalidSharePasswordError):
        return _json(403, ErrorCodes.SHARE_PASSWORD_INVALID, str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        if "not found" in message.lower():
            return _json(404, ErrorCodes.NOT_FOUND, message)
        return _json(400, ErrorCodes.INVALID_REQUEST, message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _json(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
