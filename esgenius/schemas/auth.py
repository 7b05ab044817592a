"""Pydantic schemas for login tokens and auth responses."""

from __future__ import annotations

from pydantic import BaseModel

from esgenius.schemas.user import UserRead


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str


class RegisterResponse(BaseModel):
    message: str
    user: UserRead


class LogoutResponse(BaseModel):
    message: str
