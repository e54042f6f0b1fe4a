from datetime import datetime

from pydantic import field_validator
from sqlmodel import SQLModel, Field as SQLField


class PlayerBase(SQLModel):
    name: str = SQLField(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v


class PlayerCreate(PlayerBase):
    pass


class PlayerRead(PlayerBase):
    id: int
    created_at: datetime
