"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_user, get_user_store, require_self
from src.models.user import User
from src.schemas.user import UserCreate, UserResponse, UserUpdate
from src.services.user_store import UserStore

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Register a new user."""
    return store.create(user_data)


@router.get("", response_model=list[UserResponse])
def list_users(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Get all users."""
    return store.list_all()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Get a user by id."""
    return store.get_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Update the caller's name and email."""
    require_self(user_id, current_user)
    store.update(User(id=user_id, name=user_data.name, email=user_data.email))
    return store.get_by_id(user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_user_store)],
):
    """Delete the caller's account."""
    require_self(user_id, current_user)
    store.delete_by_id(user_id)
