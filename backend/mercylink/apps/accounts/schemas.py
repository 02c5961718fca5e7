# backend/mercylink/apps/accounts/schemas.py

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .models import UserRole


class LoginRequest(BaseModel):
    # Optional so a blank form gets a 400 from the handler rather than a 422.
    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: UserRole


class LoginResponse(BaseModel):
    user: UserRead


class SuccessResponse(BaseModel):
    success: bool = True
