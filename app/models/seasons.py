"""Request/response models for seasons."""

from datetime import date, datetime
from typing import Optional

from pydantic import model_validator
from sqlmodel import SQLModel, Field as SQLField

from app.models.fields import DB_ID


class SeasonWrite(SQLModel):
    name: str = SQLField(min_length=1, max_length=255)
    start_date: date
    end_date: Optional[date] = None
    auto_end: bool = True
    description: Optional[str] = None

    @model_validator(mode="after")
    def end_not_before_start(self) -> "SeasonWrite":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class SeasonEnd(SQLModel):
    end_date: Optional[date] = None


class SeasonRead(SQLModel):
    id: int
    name: str
    start_date: date
    end_date: Optional[date] = None
    is_active: bool
    auto_end: bool
    description: Optional[str] = None
    created_at: datetime
    ended_at: Optional[datetime] = None
    ended_by: Optional[str] = None


class SeasonRosterUpdate(SQLModel):
    player_ids: list[DB_ID] = SQLField(default_factory=list)


class SeasonPlayerRead(SQLModel):
    id: int
    name: str
    joined_at: datetime
