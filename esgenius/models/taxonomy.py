"""
CustomTaxonomy model — user-defined metric categories.

Nodes live in one flat table; ``parent_id`` is a plain reference resolved
by lookup, never an ORM relationship.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String

from esgenius.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CustomTaxonomy(Base):
    __tablename__ = "custom_taxonomies"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    category: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    parent_id: int | None = Column(Integer, nullable=True, index=True)  # type: ignore[assignment]
    metrics: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    mapped_frameworks: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    validation_rules: dict = Column(JSON, nullable=False, default=dict)  # type: ignore[assignment]
    created_by: int = Column(Integer, ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
    )
