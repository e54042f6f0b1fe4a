from dataclasses import asdict
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.fields import MAX_DB_ID
from app.models.rankings import RankingEntryRead
from app.schemas.auth import AuthUser
from app.services.authz import get_current_user
from app.services.match_source import MatchSource, SqlMatchSource
from app.services.rankings_cache import RankingsCache
from app.services.rankings_service import RankingsResult, RankingsService, RankingTTLs
from app.utils.db_async import get_session

router = APIRouter(prefix="/rankings", tags=["rankings"])

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


def get_rankings_cache(request: Request) -> RankingsCache:
    """The process-wide cache created alongside the app."""
    return request.app.state.rankings_cache


def get_match_source(db: AsyncSession = Depends(get_session)) -> MatchSource:
    return SqlMatchSource(db)


def get_rankings_service(
    source: MatchSource = Depends(get_match_source),
    cache: RankingsCache = Depends(get_rankings_cache),
) -> RankingsService:
    return RankingsService(
        source,
        cache,
        ttls=RankingTTLs.from_settings(),
        form_limit=settings.rankings_form_limit,
    )


def parse_play_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD calendar date or raise 422."""
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=422, detail="Invalid date format. Use YYYY-MM-DD"
        ) from exc


def _respond(result: RankingsResult, response: Response) -> List[RankingEntryRead]:
    response.headers["X-Cache"] = "HIT" if result.cache_hit else "MISS"
    response.headers["X-Cache-Key"] = result.cache_key
    return [RankingEntryRead(**asdict(entry)) for entry in result.entries]


@router.get("/lifetime", response_model=List[RankingEntryRead])
async def rankings_lifetime(
    response: Response,
    _user: AuthUser = Depends(get_current_user),
    service: RankingsService = Depends(get_rankings_service),
) -> List[RankingEntryRead]:
    """Rankings over every recorded match."""
    return _respond(await service.rankings_lifetime(), response)


@router.get("/season/{season_id}", response_model=List[RankingEntryRead])
async def rankings_by_season(
    response: Response,
    season_id: int = Path(..., ge=1, le=MAX_DB_ID, description="Season id"),
    _user: AuthUser = Depends(get_current_user),
    service: RankingsService = Depends(get_rankings_service),
) -> List[RankingEntryRead]:
    """Rankings restricted to one season's matches."""
    return _respond(await service.rankings_by_season(season_id), response)


@router.get("/date/{play_date}", response_model=List[RankingEntryRead])
async def rankings_by_date(
    response: Response,
    play_date: str = Path(..., pattern=ISO_DATE_PATTERN, description="YYYY-MM-DD"),
    _user: AuthUser = Depends(get_current_user),
    service: RankingsService = Depends(get_rankings_service),
) -> List[RankingEntryRead]:
    """Rankings for the matches played on a single day."""
    parsed = parse_play_date(play_date)
    return _respond(await service.rankings_by_date(parsed), response)
