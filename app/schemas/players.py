"""
SQLModels for league players, to be stored in the database.
"""
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class Player(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "players"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, unique=True, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
