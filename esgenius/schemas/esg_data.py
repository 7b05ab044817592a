"""Pydantic schemas for ESG data records and dashboard summaries."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

_SCORE = {"ge": 0, "le": 100}


class EsgDataCreate(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    year: int = Field(..., ge=1900, le=2200)
    environmental_score: float = Field(..., **_SCORE)
    social_score: float = Field(..., **_SCORE)
    governance_score: float = Field(..., **_SCORE)
    compliance_rate: float | None = Field(default=None, ge=0, le=100)
    sustainability_index: str | None = Field(default=None, max_length=50)


class EsgDataUpdate(BaseModel):
    environmental_score: float | None = Field(default=None, **_SCORE)
    social_score: float | None = Field(default=None, **_SCORE)
    governance_score: float | None = Field(default=None, **_SCORE)
    compliance_rate: float | None = Field(default=None, ge=0, le=100)
    sustainability_index: str | None = Field(default=None, max_length=50)

    @field_validator("environmental_score", "social_score", "governance_score", mode="before")
    @classmethod
    def _scores_not_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Score cannot be null; omit the field to keep the current value")
        return v


class EsgDataRead(BaseModel):
    id: int
    company_name: str
    year: int
    environmental_score: float
    social_score: float
    governance_score: float
    compliance_rate: float | None
    sustainability_index: str | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class ScoreAverages(BaseModel):
    environmental: float
    social: float
    governance: float
    overall: float


class YearAverage(BaseModel):
    year: int
    records: int
    averages: ScoreAverages


class DashboardSummary(BaseModel):
    total_records: int
    total_companies: int
    averages: ScoreAverages | None
    by_year: list[YearAverage]
    latest: list[EsgDataRead]
