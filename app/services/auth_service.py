"""Staff auth helpers: password hashing, bearer sessions and user management."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
import secrets
from datetime import datetime, timedelta

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.fields import StaffRole
from app.schemas.auth import AuthSession, AuthUser

PBKDF2_ITERATIONS = 210_000


def session_ttl() -> timedelta:
    return timedelta(hours=settings.session_ttl_hours)


def normalize_username(username: str) -> str:
    """Normalize a username for storage and comparisons."""
    return username.strip().casefold()


def _b64decode(raw: str) -> bytes:
    padding = "=" * (-len(raw) % 4)
    return base64.urlsafe_b64decode(raw + padding)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def hash_pbkdf2_sha256(password: str, *, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Return a ``pbkdf2_sha256$<iterations>$<salt>$<digest>`` password hash."""
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"pbkdf2_sha256${iterations}${_b64encode(salt)}${_b64encode(digest)}"


def verify_pbkdf2_sha256(password: str, encoded_hash: str) -> bool:
    """Check ``password`` against a hash produced by ``hash_pbkdf2_sha256``."""
    try:
        algorithm, iterations_raw, salt_b64, digest_b64 = encoded_hash.split("$", 3)
        iterations = int(iterations_raw)
        salt = _b64decode(salt_b64)
        expected = _b64decode(digest_b64)
    except (ValueError, TypeError):
        return False
    if algorithm != "pbkdf2_sha256":
        return False

    actual = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(actual, expected)


def hash_session_token(token: str) -> str:
    key = settings.secret_key.encode("utf-8")
    return hmac.new(key, token.encode("utf-8"), hashlib.sha256).hexdigest()


def generate_session_token() -> str:
    """Generate a raw bearer token (stored only as a hash server-side)."""
    return secrets.token_urlsafe(32)


async def authenticate_user(
    db: AsyncSession,
    *,
    username: str,
    password: str,
) -> AuthUser | None:
    """Return the active user for valid credentials and stamp last_login_at."""
    async with db.begin():
        result = await db.execute(
            select(AuthUser).where(
                AuthUser.username == normalize_username(username),  # type: ignore[arg-type]
                AuthUser.is_active.is_(True),  # type: ignore[attr-defined]
            )
        )
        user = result.scalar_one_or_none()
        if user is None or not verify_pbkdf2_sha256(password, user.password_hash):
            return None
        user.last_login_at = datetime.utcnow()
    return user


async def issue_session(
    db: AsyncSession,
    *,
    user_id: int,
    ip: str | None,
    user_agent: str | None,
) -> tuple[str, AuthSession]:
    """Create a new session row and return (raw_token, session)."""
    now = datetime.utcnow()
    raw_token = generate_session_token()
    session = AuthSession(
        user_id=user_id,
        token_hash=hash_session_token(raw_token),
        created_at=now,
        expires_at=now + session_ttl(),
        revoked_at=None,
        ip=ip,
        user_agent=user_agent,
    )
    async with db.begin():
        db.add(session)
    return raw_token, session


async def revoke_session(db: AsyncSession, *, raw_token: str) -> None:
    """Revoke a session token (idempotent)."""
    async with db.begin():
        await db.execute(
            update(AuthSession)
            .where(
                AuthSession.token_hash == hash_session_token(raw_token),  # type: ignore[arg-type]
                AuthSession.revoked_at.is_(None),  # type: ignore[union-attr]
            )
            .values(revoked_at=datetime.utcnow())
        )


async def get_user_for_session_token(
    db: AsyncSession,
    *,
    raw_token: str,
) -> AuthUser | None:
    """Return the active user for an unexpired, unrevoked token."""
    now = datetime.utcnow()
    async with db.begin():
        result = await db.execute(
            select(AuthUser)
            .join(AuthSession, AuthUser.id == AuthSession.user_id)  # type: ignore[arg-type]
            .where(
                AuthSession.token_hash == hash_session_token(raw_token),  # type: ignore[arg-type]
                AuthSession.revoked_at.is_(None),  # type: ignore[union-attr]
                AuthSession.expires_at > now,  # type: ignore[operator,arg-type]
                AuthUser.is_active.is_(True),  # type: ignore[attr-defined]
            )
        )
        return result.scalar_one_or_none()


async def list_users(db: AsyncSession) -> list[AuthUser]:
    async with db.begin():
        result = await db.execute(
            select(AuthUser).order_by(AuthUser.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())


async def create_user(
    db: AsyncSession,
    *,
    username: str,
    password: str,
    role: StaffRole,
    email: str | None = None,
    created_by: str | None = None,
) -> AuthUser:
    """Create a staff user.

    Raises:
        ValueError: ``username_taken`` if the username already exists
    """
    normalized = normalize_username(username)
    async with db.begin():
        existing = await db.execute(
            select(AuthUser.id).where(AuthUser.username == normalized)  # type: ignore[call-overload,arg-type]
        )
        if existing.first() is not None:
            raise ValueError("username_taken")

        user = AuthUser(
            username=normalized,
            email=email.strip().casefold() if email else None,
            role=role.value,
            password_hash=hash_pbkdf2_sha256(password),
            created_by=created_by,
        )
        db.add(user)
    return user


async def _get_user(db: AsyncSession, user_id: int) -> AuthUser:
    user = await db.get(AuthUser, user_id)
    if user is None:
        raise ValueError("user_not_found")
    return user


async def update_user(
    db: AsyncSession,
    user_id: int,
    *,
    username: str | None = None,
    email: str | None = None,
    role: StaffRole | None = None,
    is_active: bool | None = None,
) -> AuthUser:
    """Partially update a staff user; ``None`` leaves a field unchanged.

    Deactivating a user also revokes their open sessions.

    Raises:
        ValueError: ``user_not_found`` or ``username_taken``
    """
    async with db.begin():
        user = await _get_user(db, user_id)

        if username is not None:
            normalized = normalize_username(username)
            if normalized != user.username:
                taken = await db.execute(
                    select(AuthUser.id).where(AuthUser.username == normalized)  # type: ignore[call-overload,arg-type]
                )
                if taken.first() is not None:
                    raise ValueError("username_taken")
                user.username = normalized
        if email is not None:
            user.email = email.strip().casefold()
        if role is not None:
            user.role = role.value
        if is_active is not None:
            user.is_active = is_active
            if not is_active:
                await _revoke_user_sessions(db, user_id)
        user.updated_at = datetime.utcnow()
    return user


async def set_user_password(db: AsyncSession, user_id: int, *, password: str) -> None:
    """Replace a user's password hash.

    Raises:
        ValueError: ``user_not_found``
    """
    async with db.begin():
        user = await _get_user(db, user_id)
        user.password_hash = hash_pbkdf2_sha256(password)
        user.updated_at = datetime.utcnow()


async def delete_user(db: AsyncSession, user_id: int, *, acting_user_id: int) -> None:
    """Delete a staff user and their sessions.

    Raises:
        ValueError: ``user_not_found`` or ``cannot_delete_self``
    """
    async with db.begin():
        user = await _get_user(db, user_id)
        if user.id == acting_user_id:
            raise ValueError("cannot_delete_self")
        await db.execute(delete(AuthSession).where(AuthSession.user_id == user_id))  # type: ignore[arg-type]
        await db.delete(user)


async def _revoke_user_sessions(db: AsyncSession, user_id: int) -> None:
    await db.execute(
        update(AuthSession)
        .where(
            AuthSession.user_id == user_id,  # type: ignore[arg-type]
            AuthSession.revoked_at.is_(None),  # type: ignore[union-attr]
        )
        .values(revoked_at=datetime.utcnow())
    )
