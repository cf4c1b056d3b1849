"""Translate application errors into the JSON error envelope.

Every failure leaves the API as ``{"status": "error", "message": "..."}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from classroom_backend.domain.exceptions import (
    AiGenerationError,
    ClassroomError,
    InvalidPromptError,
)

logger = logging.getLogger(__name__)

# Looked up along the exception's MRO; unlisted errors become 500.
_STATUS_BY_ERROR: dict[type[ClassroomError], int] = {
    InvalidPromptError: 400,
    AiGenerationError: 500,
}

_GENERIC_MESSAGE = "An unexpected error occurred. Please try again later."


def error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def status_for(exc: ClassroomError) -> int | None:
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return None


async def _classroom_error(request: Request, exc: ClassroomError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code is None:
        logger.error("Unmapped %s on %s: %s", type(exc).__name__, request.url.path, exc)
        return error_json(500, _GENERIC_MESSAGE)
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return error_json(status_code, str(exc))


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    ]
    return error_json(422, "; ".join(details))


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s", request.url.path)
    return error_json(500, _GENERIC_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""
    app.add_exception_handler(ClassroomError, _classroom_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unexpected_error)
