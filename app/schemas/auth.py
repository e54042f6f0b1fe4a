"""Staff auth tables.

Staff users (admins and editors) log in with a username and password and
receive a bearer token. Only a keyed hash of that token is stored.
"""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, SQLModel


class AuthUser(SQLModel, table=True):  # type: ignore[call-arg]
    """Staff user account."""

    __tablename__ = "auth_users"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(max_length=50, unique=True, index=True)
    email: str | None = Field(default=None)
    role: str = Field(index=True)  # "admin" | "editor"
    is_active: bool = Field(default=True, index=True)
    password_hash: str

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    created_by: str | None = Field(default=None)
    last_login_at: datetime | None = Field(default=None)


class AuthSession(SQLModel, table=True):  # type: ignore[call-arg]
    """Server-side bearer session for a staff user."""

    __tablename__ = "auth_sessions"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="auth_users.id", index=True)
    token_hash: str = Field(unique=True, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    expires_at: datetime = Field(index=True)
    revoked_at: datetime | None = Field(default=None, index=True)

    ip: str | None = Field(default=None)
    user_agent: str | None = Field(default=None)
