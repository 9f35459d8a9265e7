"""User and authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field

# bcrypt only hashes the first 72 bytes; the store rejects longer UTF-8 input
MAX_PASSWORD_LENGTH = 72


class UserCreate(BaseModel):
    """User registration request.

    Field rules (non-empty, password length, unique email) are enforced by
    UserStore.validate so that every caller gets the same messages.
    """

    name: str = Field("", max_length=255)
    email: str = Field("", max_length=255)
    password: str = Field("", max_length=MAX_PASSWORD_LENGTH)


class UserUpdate(BaseModel):
    """Profile update request. Only name and email can be changed."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)


class UserLogin(BaseModel):
    """User login request."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=MAX_PASSWORD_LENGTH)


class RefreshRequest(BaseModel):
    """Refresh token exchange request."""

    refresh_token: str


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class TokenResponse(BaseModel):
    """Access and refresh token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse
