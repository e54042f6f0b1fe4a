"""HTTP-level tests for the rankings endpoints with an in-memory data source."""

from __future__ import annotations

from datetime import date
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.routes.rankings import get_match_source
from app.schemas.auth import AuthUser
from app.services.authz import get_current_user
from app.services.match_source import PlayerRecord
from app.services.rankings_cache import RankingsCache
from tests.unit.fakes import InMemoryMatchSource, MatchFactory


@pytest.fixture
def source() -> InMemoryMatchSource:
    make_match = MatchFactory()
    return InMemoryMatchSource(
        players=[
            PlayerRecord(id=1, name="Alice"),
            PlayerRecord(id=2, name="Bob"),
            PlayerRecord(id=3, name="Cara"),
        ],
        matches=[
            make_match((1,), (3,), winning_team=1, season_id=1, play_date=date(2024, 1, 15)),
            make_match((2,), (3,), winning_team=1, season_id=2, play_date=date(2024, 2, 3)),
        ],
    )


@pytest_asyncio.fixture()
async def api_client(source: InMemoryMatchSource) -> AsyncGenerator[AsyncClient, None]:
    """Client with auth and the match source overridden; a fresh cache per test."""
    staff = AuthUser(id=1, username="editor", role="editor", password_hash="unused")

    async def _current_user_override() -> AuthUser:
        return staff

    app.dependency_overrides[get_current_user] = _current_user_override
    app.dependency_overrides[get_match_source] = lambda: source
    app.state.rankings_cache = RankingsCache()
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_current_user, None)
        app.dependency_overrides.pop(get_match_source, None)


@pytest.mark.asyncio
async def test_lifetime_rankings_payload(api_client: AsyncClient) -> None:
    response = await api_client.get("/rankings/lifetime")

    assert response.status_code == 200
    assert response.headers["X-Cache"] == "MISS"
    assert response.headers["X-Cache-Key"] == "rankings:lifetime"

    body = response.json()
    assert [row["name"] for row in body] == ["Alice", "Bob", "Cara"]
    alice = body[0]
    assert alice == {
        "id": 1,
        "name": "Alice",
        "wins": 1,
        "losses": 0,
        "total_matches": 1,
        "points": 4,
        "win_percentage": 100.0,
        "money_lost": 0,
        "form": [{"result": "win", "play_date": "2024-01-15"}],
    }
    cara = body[2]
    assert (cara["wins"], cara["losses"], cara["points"], cara["money_lost"]) == (0, 2, 2, 40000)
    assert [f["play_date"] for f in cara["form"]] == ["2024-02-03", "2024-01-15"]


@pytest.mark.asyncio
async def test_season_rankings_only_count_that_season(api_client: AsyncClient) -> None:
    response = await api_client.get("/rankings/season/2")

    assert response.status_code == 200
    assert response.headers["X-Cache-Key"] == "rankings:season:2"
    by_name = {row["name"]: row for row in response.json()}
    assert by_name["Alice"]["total_matches"] == 0
    assert by_name["Alice"]["form"] == []
    assert by_name["Bob"]["wins"] == 1
    assert by_name["Bob"]["losses"] == 0


@pytest.mark.asyncio
async def test_date_rankings_twice_reports_miss_then_hit(
    api_client: AsyncClient, source: InMemoryMatchSource
) -> None:
    first = await api_client.get("/rankings/date/2024-01-15")
    second = await api_client.get("/rankings/date/2024-01-15")

    assert first.status_code == second.status_code == 200
    assert first.headers["X-Cache"] == "MISS"
    assert second.headers["X-Cache"] == "HIT"
    assert first.json() == second.json()
    assert source.match_calls == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("season_id", ["0", "-4", "abc", "2147483648"])
async def test_invalid_season_id_is_rejected(api_client: AsyncClient, season_id: str) -> None:
    response = await api_client.get(f"/rankings/season/{season_id}")

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("play_date", ["15-01-2024", "2024-1-5", "yesterday", "2024-02-30", "2024-13-01"])
async def test_invalid_play_date_is_rejected(api_client: AsyncClient, play_date: str) -> None:
    response = await api_client.get(f"/rankings/date/{play_date}")

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_rankings_require_authentication() -> None:
    app.state.rankings_cache = RankingsCache()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/rankings/lifetime")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_health_check(api_client: AsyncClient) -> None:
    response = await api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
