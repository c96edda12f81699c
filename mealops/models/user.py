"""User account models."""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from mealops.models.base import CamelModel, UTCDateTime


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=256)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class RoleUpdate(BaseModel):
    role: Role


class UserOut(CamelModel):
    id: str
    email: str
    role: Role
    created_at: Optional[UTCDateTime] = None


class AuthResponse(BaseModel):
    user: UserOut
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
