"""
SQLModels for recorded matches.

Team 1 is slots 1/2 and team 2 is slots 3/4. Solo matches leave slots 2 and 4
empty.
"""
from datetime import date, datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Column
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from app.models.fields import MatchType


class Match(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("winning_team IN (1, 2)", name="ck_matches_winning_team"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    season_id: int = Field(foreign_key="seasons.id", index=True)
    play_date: date = Field(index=True)
    match_type: MatchType = Field(
        default=MatchType.duo,
        sa_column=Column(
            SAEnum(MatchType, name="match_type_enum"),
            nullable=False,
            default=MatchType.duo,
        ),
    )

    player1_id: int = Field(foreign_key="players.id")
    player2_id: Optional[int] = Field(default=None, foreign_key="players.id")
    player3_id: int = Field(foreign_key="players.id")
    player4_id: Optional[int] = Field(default=None, foreign_key="players.id")

    team1_score: int
    team2_score: int
    winning_team: int

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
