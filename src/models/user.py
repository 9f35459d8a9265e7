"""User model."""

from sqlalchemy import Column, DateTime, Integer, String, func

from src.database import Base


class User(Base):
    """User account with login credentials and the current refresh token."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # bcrypt hash, stored in the legacy "password" column
    password_hash = Column("password", String(255), nullable=False)
    refresh_token = Column(String(512), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
