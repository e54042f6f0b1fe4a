"""
Contains enums and PyDantic fields to be used in various models.
"""
from enum import Enum
from datetime import date
from typing import Annotated
from pydantic import Field as PydField


class MatchType(str, Enum):
    solo = "solo"
    duo = "duo"

    @property
    def max_players(self) -> int:
        return {"solo": 2, "duo": 4}[self.value]


class FormResult(str, Enum):
    win = "win"
    loss = "loss"


class StaffRole(str, Enum):
    admin = "admin"
    editor = "editor"


# Upper bound of a Postgres INTEGER primary key
MAX_DB_ID = 2_147_483_647

DB_ID = Annotated[int, PydField(..., ge=1, le=MAX_DB_ID)]
PLAY_DATE = Annotated[date, PydField(..., ge=date(2000, 1, 1))]
SCORE = Annotated[int, PydField(..., ge=0)]
