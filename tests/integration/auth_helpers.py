"""Integration-test helpers for staff auth and league fixtures."""

from __future__ import annotations

import base64
import hashlib
import os
from datetime import UTC, date, datetime

from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

PBKDF2_SHA256_PREFIX = "pbkdf2_sha256"


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def pbkdf2_sha256_hash(
    password: str,
    *,
    iterations: int = 1_000,
    salt: bytes | None = None,
) -> str:
    """Return a portable password hash string.

    Format: "pbkdf2_sha256$<iterations>$<salt_b64>$<digest_b64>"
    """
    if salt is None:
        salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        iterations,
    )
    return f"{PBKDF2_SHA256_PREFIX}${iterations}${_b64encode(salt)}${_b64encode(dk)}"


async def create_auth_user(
    db_session: AsyncSession,
    *,
    username: str,
    role: str,
    password: str,
    is_active: bool = True,
) -> int:
    """Insert a user row into auth_users and return its id."""
    now = datetime.now(UTC).replace(tzinfo=None)
    result = await db_session.execute(
        text(
            """
            INSERT INTO auth_users (
                username,
                role,
                is_active,
                password_hash,
                created_at,
                updated_at
            )
            VALUES (
                :username,
                :role,
                :is_active,
                :password_hash,
                :created_at,
                :updated_at
            )
            RETURNING id
            """
        ),
        {
            "username": username.casefold(),
            "role": role,
            "is_active": is_active,
            "password_hash": pbkdf2_sha256_hash(password),
            "created_at": now,
            "updated_at": now,
        },
    )
    user_id = result.scalar_one()
    await db_session.commit()
    return int(user_id)


async def login_staff(app_client: AsyncClient, *, username: str, password: str) -> dict[str, str]:
    """Log in through the API and return ready-to-use auth headers."""
    response = await app_client.post(
        "/auth/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def staff_headers(
    app_client: AsyncClient,
    db_session: AsyncSession,
    *,
    username: str = "admin",
    role: str = "admin",
    password: str = "password123",
) -> dict[str, str]:
    """Create a staff user and return bearer headers for them."""
    await create_auth_user(db_session, username=username, role=role, password=password)
    return await login_staff(app_client, username=username, password=password)


async def create_season(
    app_client: AsyncClient,
    headers: dict[str, str],
    *,
    name: str = "Spring",
    start_date: date = date(2024, 1, 1),
    end_date: date | None = None,
    auto_end: bool = False,
) -> int:
    payload = {
        "name": name,
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat() if end_date else None,
        "auto_end": auto_end,
    }
    response = await app_client.post("/seasons", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return int(response.json()["id"])


async def create_player(app_client: AsyncClient, headers: dict[str, str], name: str) -> int:
    response = await app_client.post("/players", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return int(response.json()["id"])


async def record_match(
    app_client: AsyncClient,
    headers: dict[str, str],
    *,
    season_id: int,
    team1: tuple[int, ...],
    team2: tuple[int, ...],
    winning_team: int,
    play_date: date = date(2024, 1, 15),
) -> dict:
    payload = {
        "season_id": season_id,
        "play_date": play_date.isoformat(),
        "match_type": "solo" if len(team1) == 1 else "duo",
        "player1_id": team1[0],
        "player2_id": team1[1] if len(team1) > 1 else None,
        "player3_id": team2[0],
        "player4_id": team2[1] if len(team2) > 1 else None,
        "team1_score": 11 if winning_team == 1 else 6,
        "team2_score": 6 if winning_team == 1 else 11,
        "winning_team": winning_team,
    }
    response = await app_client.post("/matches", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
