"""Pydantic schemas for report generation, health and integration status."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from esgenius.schemas.esg_data import DashboardSummary


class ReportRequest(BaseModel):
    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class ReportResponse(BaseModel):
    success: bool = True
    type: str
    data: dict[str, Any]


class DashboardSummaryResponse(BaseModel):
    success: bool = True
    data: DashboardSummary


class ReportTypesResponse(BaseModel):
    success: bool = True
    data: list[str]


class HealthResponse(BaseModel):
    status: str
    message: str
    db: bool
    version: str


class ConnectorStatus(BaseModel):
    name: str
    configured: bool
    base_url: str | None


class IntegrationStatusResponse(BaseModel):
    success: bool = True
    integrations: list[ConnectorStatus]


class ComplianceRequirement(BaseModel):
    id: str
    framework: str
    title: str
    description: str
    metrics: list[str]
