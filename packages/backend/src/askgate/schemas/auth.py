"""Pydantic schemas for registration, login and the current user.

Request fields are optional on purpose: missing values are reported by
the auth gateway with the API's own 400 messages rather than FastAPI's
generic validation errors. UserRead has no secret field, so the password
hash can't be serialized from it.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PublicProfile(BaseModel):
    id: uuid.UUID
    name: str
    email: str

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    data: PublicProfile


class UserRead(PublicProfile):
    created_at: datetime


class MeResponse(BaseModel):
    success: bool = True
    data: UserRead
