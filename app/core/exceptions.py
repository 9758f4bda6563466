"""
Application error taxonomy.

Services raise these; the HTTP layer maps them to responses in one place
(see ``register_exception_handlers``). Every error carries a stable ``code``
tag that clients can branch on, plus the HTTP status it maps to.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for all application-level errors."""

    code: str = "APP_ERROR"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Application error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(AppError):
    """Missing or invalid startup configuration. Fatal, never per-request."""

    code = "CONFIGURATION_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Invalid configuration"


class DuplicateEmail(AppError):
    """Registration with an email already on file."""

    code = "DUPLICATE_EMAIL"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already in use"


class InvalidCredentials(AppError):
    """
    Wrong password, unknown account, or any refresh token failure.

    Deliberately undifferentiated so callers learn nothing about account
    existence or session state.
    """

    code = "INVALID_CREDENTIALS"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class InvalidToken(AppError):
    """Token failed signature, expiry or type verification."""

    code = "INVALID_TOKEN"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"


class InvalidTaskId(AppError):
    code = "INVALID_TASK_ID"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid task id"


class TaskNotFound(AppError):
    code = "TASK_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Task not found"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as ``{"detail": ..., "code": ...}``."""
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the AppError handler to the application."""
    app.add_exception_handler(AppError, app_error_handler)
