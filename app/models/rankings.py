"""Pydantic models for rankings responses."""

from datetime import date

from pydantic import BaseModel, Field

from app.models.fields import FormResult


class FormEntryRead(BaseModel):
    result: FormResult
    play_date: date


class RankingEntryRead(BaseModel):
    id: int
    name: str
    wins: int
    losses: int
    total_matches: int
    points: int
    win_percentage: float
    money_lost: int
    form: list[FormEntryRead] = Field(default_factory=list)
