"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_current_user, get_user_store
from src.models.user import User
from src.schemas.user import RefreshRequest, TokenResponse, UserLogin, UserResponse
from src.services.errors import AuthenticationError, NotFoundError
from src.services.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.services.user_store import UserStore

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

INVALID_CREDENTIALS_DETAIL = "Incorrect email or password"


def issue_tokens(store: UserStore, user: User) -> TokenResponse:
    """Create a token pair and persist the refresh token."""
    refresh_token = create_refresh_token(user.id)
    store.update_refresh_token(user.email, refresh_token)
    return TokenResponse(
        access_token=create_access_token(user.id, user.email),
        refresh_token=refresh_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
def login(
    credentials: UserLogin,
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Login with email and password."""
    # Unknown email and wrong password look the same to the client
    try:
        store.authenticate(credentials.email, credentials.password)
    except (NotFoundError, AuthenticationError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_DETAIL,
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    user = store.get_by_email(credentials.email)
    return issue_tokens(store, user)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    body: RefreshRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Exchange a refresh token for a new token pair."""
    if decode_token(body.refresh_token, REFRESH_TOKEN_TYPE) is None:
        raise AuthenticationError("invalid refresh token")

    try:
        user = store.get_by_refresh_token(body.refresh_token)
    except NotFoundError:
        raise AuthenticationError("invalid refresh token") from None

    return issue_tokens(store, user)


@router.post("/logout")
def logout(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Logout by revoking the stored refresh token."""
    store.update_refresh_token(current_user.email, None)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user
