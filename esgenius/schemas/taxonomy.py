"""Pydantic schemas for custom taxonomy nodes."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class TaxonomyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    parent_id: int | None = None
    metrics: list[dict[str, Any]] = Field(default_factory=list)
    mapped_frameworks: list[dict[str, Any]] = Field(default_factory=list)
    validation_rules: dict[str, Any] = Field(default_factory=dict)


class TaxonomyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    parent_id: int | None = None
    metrics: list[dict[str, Any]] | None = None
    validation_rules: dict[str, Any] | None = None

    @field_validator("name", "category", "metrics", "validation_rules", mode="before")
    @classmethod
    def _not_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field cannot be null; omit it to keep the current value")
        return v


class FrameworkMapping(BaseModel):
    framework: str = Field(..., min_length=1)
    mapping: dict[str, Any] = Field(default_factory=dict)


class TaxonomyRead(BaseModel):
    id: int
    name: str
    category: str
    parent_id: int | None
    metrics: list[dict[str, Any]]
    mapped_frameworks: list[dict[str, Any]]
    validation_rules: dict[str, Any]
    created_by: int
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class TaxonomyNode(TaxonomyRead):
    children: list["TaxonomyNode"] = Field(default_factory=list)


TaxonomyNode.model_rebuild()
