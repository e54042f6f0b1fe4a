"""Request/response models for matches."""

from datetime import date, datetime
from typing import Optional

from sqlmodel import SQLModel, Field as SQLField

from app.models.fields import DB_ID, PLAY_DATE, SCORE, MatchType


class MatchWrite(SQLModel):
    season_id: DB_ID
    play_date: PLAY_DATE
    match_type: MatchType = MatchType.duo
    player1_id: DB_ID
    player2_id: Optional[DB_ID] = None
    player3_id: DB_ID
    player4_id: Optional[DB_ID] = None
    team1_score: SCORE
    team2_score: SCORE
    winning_team: int = SQLField(..., ge=1, le=2)


class MatchRead(SQLModel):
    id: int
    season_id: int
    play_date: date
    match_type: MatchType
    player1_id: int
    player2_id: Optional[int] = None
    player3_id: int
    player4_id: Optional[int] = None
    team1_score: int
    team2_score: int
    winning_team: int
    created_at: datetime


class PlayDatesRead(SQLModel):
    play_dates: list[date]
    latest: Optional[date] = None
