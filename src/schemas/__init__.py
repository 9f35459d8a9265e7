"""Pydantic schemas for API requests and responses."""

from src.schemas.user import (
    RefreshRequest,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserLogin",
    "RefreshRequest",
    "UserResponse",
    "TokenResponse",
]
