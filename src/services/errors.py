"""Errors raised by the user store."""


class UserStoreError(Exception):
    """Base class for user store failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(UserStoreError):
    """Input failed a business rule (empty field, short password, duplicate email)."""


class NotFoundError(UserStoreError):
    """No user matches the given id, email or token."""


class AuthenticationError(UserStoreError):
    """Credentials or token did not match."""


class StorageError(UserStoreError):
    """Unclassified database failure."""


class NoRowsAffectedError(UserStoreError):
    """The driver reported a negative affected-row count."""
