"""User store: validated CRUD and authentication over the users table."""

import logging
from typing import Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.user import User
from src.services.errors import (
    AuthenticationError,
    NoRowsAffectedError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.services.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt silently truncates input past this many bytes
MAX_PASSWORD_BYTES = 72

# Columns each update operation is allowed to write
PROFILE_COLUMNS = ("name", "email")
REFRESH_TOKEN_COLUMNS = ("refresh_token",)

DUPLICATE_EMAIL_MESSAGE = "already a registered user with this email"
USER_NOT_FOUND_MESSAGE = "not found user"
EMAIL_NOT_FOUND_MESSAGE = "not found user by e-mail"
PASSWORD_MISMATCH_MESSAGE = "password don't match"  # noqa: S105
TOKEN_NOT_FOUND_MESSAGE = "not found user by refresh token"  # noqa: S105
NO_ROWS_AFFECTED_MESSAGE = "no affected lines"


class NewUser(Protocol):
    """Anything carrying the fields needed to register a user."""

    name: str
    email: str
    password: str


class UserStore:
    """Service for user account persistence and authentication."""

    def __init__(self, db: Session):
        self.db = db

    def validate(self, user: NewUser) -> tuple[bool, str]:
        """Check registration data, stopping at the first failing rule.

        The final rule queries the database for an existing user with the
        same email, so this is not a pure function.

        Returns:
            (True, "") when every rule passes, otherwise (False, message).
        """
        if not user.name:
            return False, "name cannot be empty"

        if not user.email:
            return False, "email cannot be empty"

        if not user.password:
            return False, "password cannot be empty"
        if len(user.password) < MIN_PASSWORD_LENGTH:
            return False, f"password must be at least {MIN_PASSWORD_LENGTH} characters"
        if len(user.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False, f"password must be at most {MAX_PASSWORD_BYTES} bytes"

        if self._email_exists(user.email):
            return False, DUPLICATE_EMAIL_MESSAGE

        return True, ""

    def authenticate(self, email: str, password: str) -> bool:
        """Check a password against the stored hash for the given email."""
        try:
            password_hash = (
                self.db.query(User.password_hash).filter(User.email == email).scalar()
            )
        except SQLAlchemyError as e:
            raise self._storage_error(e, "authenticate user") from e

        if password_hash is None:
            raise NotFoundError(EMAIL_NOT_FOUND_MESSAGE)

        # No stored hash can come from a longer password
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise AuthenticationError(PASSWORD_MISMATCH_MESSAGE)
        if not verify_password(password, password_hash):
            raise AuthenticationError(PASSWORD_MISMATCH_MESSAGE)

        return True

    def create(self, user_data: NewUser) -> User:
        """Validate and insert a new user.

        The returned user carries the id generated by the insert.
        """
        valid, message = self.validate(user_data)
        if not valid:
            raise ValidationError(message)

        user = User(
            name=user_data.name,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
        )
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            logger.warning(f"Unique constraint rejected user {user_data.email}: {e.orig}")
            raise ValidationError(DUPLICATE_EMAIL_MESSAGE) from e
        except SQLAlchemyError as e:
            raise self._storage_error(e, "create user") from e

        self.db.refresh(user)
        logger.info(f"Created user {user.id}")
        return user

    def list_all(self) -> list[User]:
        """Get every registered user."""
        try:
            return self.db.query(User).order_by(User.id).all()
        except SQLAlchemyError as e:
            raise self._storage_error(e, "list users") from e

    def get_by_id(self, user_id: int) -> User:
        """Get a user by id, loading only id, name and email.

        The returned object is detached from the session, so it never carries
        the password hash or refresh token.
        """
        try:
            row = (
                self.db.query(User.id, User.name, User.email)
                .filter(User.id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise self._storage_error(e, "get user by id") from e

        if row is None:
            raise NotFoundError(USER_NOT_FOUND_MESSAGE)

        found_id, name, email = row
        return User(id=found_id, name=name, email=email)

    def get_by_email(self, email: str) -> User:
        """Get a user by email."""
        try:
            user = self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            raise self._storage_error(e, "get user by email") from e

        if user is None:
            raise NotFoundError(EMAIL_NOT_FOUND_MESSAGE)
        return user

    def get_by_refresh_token(self, refresh_token: str) -> User:
        """Get the user currently holding the given refresh token."""
        # An empty token would otherwise match every user without a session
        if not refresh_token:
            raise NotFoundError(TOKEN_NOT_FOUND_MESSAGE)

        try:
            user = self.db.query(User).filter(User.refresh_token == refresh_token).first()
        except SQLAlchemyError as e:
            raise self._storage_error(e, "get user by refresh token") from e

        if user is None:
            raise NotFoundError(TOKEN_NOT_FOUND_MESSAGE)
        return user

    def update(self, user: User) -> int:
        """Write the profile columns (name, email) of an existing user.

        Any other populated attribute of ``user`` is ignored.
        """
        if not self._id_exists(user.id):
            raise NotFoundError(USER_NOT_FOUND_MESSAGE)

        values = {column: getattr(user, column) for column in PROFILE_COLUMNS}
        try:
            rows_affected = self.db.query(User).filter(User.id == user.id).update(values)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Unique constraint rejected update of user {user.id}: {e.orig}")
            raise ValidationError(DUPLICATE_EMAIL_MESSAGE) from e
        except SQLAlchemyError as e:
            raise self._storage_error(e, "update user") from e

        return self._check_rows_affected(rows_affected)

    def update_refresh_token(self, email: str, refresh_token: str | None) -> int:
        """Store (or clear, with None) the refresh token of the user with this email."""
        try:
            user_id = self.db.query(User.id).filter(User.email == email).scalar()
        except SQLAlchemyError as e:
            raise self._storage_error(e, "find user by email") from e

        if user_id is None:
            raise NotFoundError(EMAIL_NOT_FOUND_MESSAGE)

        values = dict.fromkeys(REFRESH_TOKEN_COLUMNS, refresh_token)
        try:
            rows_affected = self.db.query(User).filter(User.id == user_id).update(values)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._storage_error(e, "update refresh token") from e

        return self._check_rows_affected(rows_affected)

    def delete_by_id(self, user_id: int) -> int:
        """Delete a user by id."""
        if not self._id_exists(user_id):
            raise NotFoundError(USER_NOT_FOUND_MESSAGE)

        try:
            rows_affected = self.db.query(User).filter(User.id == user_id).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._storage_error(e, "delete user") from e

        logger.info(f"Deleted user {user_id}")
        return self._check_rows_affected(rows_affected)

    def _email_exists(self, email: str) -> bool:
        try:
            return self.db.query(User.id).filter(User.email == email).first() is not None
        except SQLAlchemyError as e:
            raise self._storage_error(e, "check email") from e

    def _id_exists(self, user_id: int | None) -> bool:
        if user_id is None:
            return False
        try:
            return self.db.query(User.id).filter(User.id == user_id).first() is not None
        except SQLAlchemyError as e:
            raise self._storage_error(e, "check user id") from e

    def _check_rows_affected(self, rows_affected: int) -> int:
        # DB-API drivers report -1 when the count cannot be determined
        if rows_affected < 0:
            logger.error(f"Driver reported {rows_affected} affected rows")
            raise NoRowsAffectedError(NO_ROWS_AFFECTED_MESSAGE)
        return rows_affected

    def _storage_error(self, exc: SQLAlchemyError, action: str) -> StorageError:
        """Log a database failure once, roll back, and wrap it."""
        logger.error(f"Database error during {action}: {exc}")
        self.db.rollback()
        return StorageError(f"failed to {action}")
