"""
Centralised application settings loaded from environment / .env file.

Uses pydantic-settings so every value can be overridden via env vars
or the .env file at the project root.
"""

from __future__ import annotations

import json
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

_DEFAULT_SECRET = "CHANGE-ME-TO-A-RANDOM-64-CHAR-HEX-STRING-IN-PRODUCTION"


class Settings(BaseSettings):
    # ── Project ──────────────────────────────────────────────────────
    PROJECT_NAME: str = "ESGenius"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # ── Database (async SQLite via aiosqlite) ───────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./esg.sqlite"

    # ── JWT ──────────────────────────────────────────────────────────
    SECRET_KEY: str = _DEFAULT_SECRET
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    COOKIE_SECURE: bool = False  # Set True in HTTPS production

    # ── Password hashing ────────────────────────────────────────────
    BCRYPT_ROUNDS: int = 10

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def _min_rounds(cls, v: int) -> int:
        if v < 10:
            raise ValueError("BCRYPT_ROUNDS must be at least 10")
        return v

    # ── CORS ─────────────────────────────────────────────────────────
    CORS_ORIGINS: Annotated[list[str], NoDecode] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5000",
    ]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v: object) -> list[str]:
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return json.loads(v)
            return [o.strip() for o in v.split(",") if o.strip()]
        return v  # type: ignore[return-value]

    # ── Logging ──────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    # ── Default admin (seeded on first startup) ─────────────────────
    FIRST_ADMIN_EMAIL: str = "admin@esgenius.local"
    FIRST_ADMIN_PASSWORD: str = "changeme123"

    # ── Reports API client ──────────────────────────────────────────
    REPORTS_API_BASE: str = "http://localhost:5000/api"

    # ── Third-party connectors ──────────────────────────────────────
    PASTEL_BASE_URL: str = "http://localhost:8080/pastel"
    PASTEL_API_KEY: str | None = None
    PASTEL_COMPANY_ID: str | None = None
    SHEQ_BASE_URL: str | None = None
    SHEQ_API_KEY: str | None = None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


settings = Settings()

if settings.SECRET_KEY == _DEFAULT_SECRET:
    import logging

    logging.getLogger("esgenius.core.config").warning(
        "⚠️  WARNING: You are running with the default INSECURE Secret Key! "
        "Update the SECRET_KEY in your .env file immediately."
    )
