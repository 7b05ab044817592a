"""
ESG data model — one row of scores per company per year.

Column names keep the camelCase layout of the ``esg_data`` table;
Python attributes are snake_case.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (Column, DateTime, Float, Index, Integer, String,
                        UniqueConstraint)

from esgenius.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EsgDataRecord(Base):
    __tablename__ = "esg_data"
    __table_args__ = (
        UniqueConstraint("companyName", "year", name="uq_esg_company_year"),
        Index("ix_esg_data_company_name", "companyName"),
        Index("ix_esg_data_year", "year"),
        Index("ix_esg_data_created_at", "createdAt"),
        Index("ix_esg_data_company_year", "companyName", "year"),
    )

    id: int = Column(Integer, primary_key=True)  # type: ignore[assignment]
    company_name: str = Column("companyName", String(255), nullable=False)  # type: ignore[assignment]
    year: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    environmental_score: float = Column("environmentalScore", Float, nullable=False)  # type: ignore[assignment]
    social_score: float = Column("socialScore", Float, nullable=False)  # type: ignore[assignment]
    governance_score: float = Column("governanceScore", Float, nullable=False)  # type: ignore[assignment]
    compliance_rate: float | None = Column("complianceRate", Float, nullable=True)  # type: ignore[assignment]
    sustainability_index: str | None = Column("sustainabilityIndex", String(50), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        "createdAt", DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        "updatedAt",
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
