"""
User model — authentication, approval lifecycle & role-based access control.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from esgenius.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    password_hash: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    full_name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    role: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default="user",
        server_default="user",
    )  # user | admin | super_admin | supervisor | data_entry
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default="pending",
        server_default="pending",
    )  # pending | approved | rejected
    job_title: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    phone_number: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    bio: str | None = Column(String(1000), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
    )
    approved_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]

    @property
    def is_approved(self) -> bool:
        return self.status == "approved"
