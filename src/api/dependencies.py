"""FastAPI dependencies for authentication and database."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.user import User
from src.services.errors import NotFoundError
from src.services.security import ACCESS_TOKEN_TYPE, decode_token
from src.services.user_store import UserStore

security = HTTPBearer()


def get_user_store(
    db: Annotated[Session, Depends(get_db)],
) -> UserStore:
    """Get user store bound to the request session."""
    return UserStore(db)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> User:
    """Get the current authenticated user from JWT token."""
    payload = decode_token(credentials.credentials, ACCESS_TOKEN_TYPE)

    if payload is None or payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return store.get_by_id(int(payload["sub"]))
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None


def require_self(user_id: int, current_user: User) -> None:
    """Reject changes to an account other than the caller's own."""
    if current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot modify another user",
        )
