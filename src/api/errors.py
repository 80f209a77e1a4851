"""
Centralized error responder.

Every failure leaving the API is rendered here as a JSON ``{"message": ...}``
body. Domain error kinds map to status codes in one table; request
validation errors become 400 with a message naming the offending field.
"""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.domain.exceptions import (
    AccountError,
    BadRequestError,
    ConflictError,
    DeliveryError,
    NotFoundError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

# Checked in order; first matching kind wins.
_STATUS_BY_KIND: list[tuple[type[AccountError], int]] = [
    (BadRequestError, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (DeliveryError, status.HTTP_502_BAD_GATEWAY),
]


def status_for(exc: AccountError) -> int:
    """Return the HTTP status code for a domain error."""
    for kind, status_code in _STATUS_BY_KIND:
        if isinstance(exc, kind):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def validation_message(errors: Sequence[Any]) -> str:
    """
    Build a human-readable message from the first pydantic error.

    Examples:
        missing required email field
        password should have a minimum length of 6
        password should have a maximum length of 72 bytes
    """
    if not errors:
        return "Invalid request"

    error = errors[0]
    loc = [part for part in error.get("loc", ()) if part != "body"]
    field = str(loc[-1]) if loc else "body"
    ctx = error.get("ctx") or {}
    error_type = error.get("type")

    if error_type == "missing":
        return f"missing required {field} field"
    if error_type == "string_too_short":
        return f"{field} should have a minimum length of {ctx.get('min_length')}"
    if error_type == "string_pattern_mismatch":
        return f"{field} must be a valid email" if field == "email" else f"{field} is invalid"
    if error_type == "enum":
        return f"{field} must be one of {ctx.get('expected')}"
    if error_type == "string_type":
        return f"{field} must be a string"
    if error_type in ("json_invalid", "model_attributes_type", "dict_type"):
        return "request body must be a JSON object"
    if error_type == "value_error" and ctx.get("error") is not None:
        return str(ctx["error"])
    return f"{field}: {error.get('msg', 'is invalid')}"


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    """Render a domain error with the status code of its kind."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=status_for(exc),
        content={"message": exc.message},
        headers=headers,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": validation_message(exc.errors())},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method) in the same shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render anything unexpected as 500 without leaking internals."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the centralized responder on an application."""
    app.add_exception_handler(AccountError, account_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
