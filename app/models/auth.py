"""Pydantic models for staff auth endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.fields import StaffRole


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")
    password: str = Field(..., min_length=8)
    email: Optional[str] = None
    role: StaffRole


class UserUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    username: Optional[str] = Field(default=None, min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")
    email: Optional[str] = None
    role: Optional[StaffRole] = None
    is_active: Optional[bool] = None


class PasswordUpdate(BaseModel):
    password: str = Field(..., min_length=8)


class UserRead(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    role: StaffRole
    is_active: bool
    created_at: datetime
    created_by: Optional[str] = None
    last_login_at: Optional[datetime] = None
