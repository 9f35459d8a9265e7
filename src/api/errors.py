"""Translate user store errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.services.errors import (
    AuthenticationError,
    NoRowsAffectedError,
    NotFoundError,
    StorageError,
    UserStoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[UserStoreError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    NoRowsAffectedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: UserStoreError) -> int:
    """Get the HTTP status code for a store error."""
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def user_store_error_handler(request: Request, exc: UserStoreError) -> JSONResponse:
    """Render a store error as a JSON error body."""
    status_code = status_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        # Already logged where it was raised; keep storage details out of the response
        return JSONResponse(
            status_code=status_code,
            content={"detail": "An unexpected error occurred. Please try again later."},
        )
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    """Install the store error handler on the application."""
    app.add_exception_handler(UserStoreError, user_store_error_handler)
