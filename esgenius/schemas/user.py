"""Pydantic schemas for User CRUD."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

VALID_ROLES = {"user", "admin", "super_admin", "supervisor", "data_entry"}
VALID_STATUSES = {"pending", "approved", "rejected"}


def _normalise_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("Invalid email address")
    return v


def _check_role(v: str | None) -> str | None:
    if v is not None and v not in VALID_ROLES:
        raise ValueError(f"Role must be one of: {sorted(VALID_ROLES)}")
    return v


class UserCreate(BaseModel):
    email: str
    password: str
    full_name: str
    role: str = "user"

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str) -> str:
        return _check_role(v)  # type: ignore[return-value]

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class UserRegister(BaseModel):
    """Self-service sign-up; always lands in ``pending`` with role ``user``."""

    email: str
    password: str
    full_name: str

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class UserRead(BaseModel):
    id: int
    email: str
    full_name: str
    role: str
    status: str
    job_title: str | None = None
    phone_number: str | None = None
    bio: str | None = None
    created_at: datetime | None
    approved_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    full_name: str | None = None
    role: str | None = None
    status: str | None = None
    password: str | None = None

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str | None) -> str | None:
        return _check_role(v)

    @field_validator("status")
    @classmethod
    def _validate_status(cls, v: str | None) -> str | None:
        if v is not None and v not in VALID_STATUSES:
            raise ValueError(f"Status must be one of: {sorted(VALID_STATUSES)}")
        return v


class ProfileUpdate(BaseModel):
    full_name: str | None = None
    job_title: str | None = None
    phone_number: str | None = None
    bio: str | None = None
