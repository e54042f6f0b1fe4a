from datetime import date, datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class Season(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "seasons"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    start_date: date
    end_date: Optional[date] = Field(default=None)
    # Several seasons may be active at once; the newest start_date is the default
    is_active: bool = Field(default=True, index=True)
    auto_end: bool = Field(default=True, description="End automatically once end_date has passed")
    description: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    ended_at: Optional[datetime] = Field(default=None)
    ended_by: Optional[str] = Field(default=None, max_length=255)


class SeasonPlayer(SQLModel, table=True):  # type: ignore[call-arg]
    """Roster membership of a player in a season."""

    __tablename__ = "season_players"
    __table_args__ = (UniqueConstraint("season_id", "player_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    season_id: int = Field(foreign_key="seasons.id", index=True, ondelete="CASCADE")
    player_id: int = Field(foreign_key="players.id", index=True, ondelete="CASCADE")
    joined_at: datetime = Field(default_factory=datetime.utcnow)
