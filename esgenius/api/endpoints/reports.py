"""
Reporting endpoints, health and integration status.

Dashboard reads aggregate ``esg_data`` in the database; the ``company``
report type is the write path and upserts the submitted record.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.api.deps import (CREATE_DATA, READ_DATA, UPDATE_DATA, get_db,
                               has_permission, require_permission)
from esgenius.core.config import settings
from esgenius.core.exceptions import UnknownReportTypeError
from esgenius.models.user import User
from esgenius.schemas.esg_data import EsgDataCreate, EsgDataRead
from esgenius.schemas.reports import (ComplianceRequirement, ConnectorStatus,
                                      DashboardSummaryResponse, HealthResponse,
                                      IntegrationStatusResponse, ReportRequest,
                                      ReportResponse, ReportTypesResponse)
from esgenius.services import esg_store

router = APIRouter(tags=["reports"])
logger = logging.getLogger(__name__)

REPORT_TYPES = ["comprehensive", "performance", "company"]

COMPLIANCE_REQUIREMENTS: list[ComplianceRequirement] = [
    ComplianceRequirement(
        id="gri-305",
        framework="GRI",
        title="GRI 305: Emissions",
        description="Disclose direct (Scope 1) and energy indirect (Scope 2) GHG emissions.",
        metrics=["scope1_emissions", "scope2_emissions"],
    ),
    ComplianceRequirement(
        id="gri-403",
        framework="GRI",
        title="GRI 403: Occupational Health and Safety",
        description="Report work-related injuries, lost time and safety training.",
        metrics=["injuries", "lost_time_days", "training_hours"],
    ),
    ComplianceRequirement(
        id="tcfd-metrics",
        framework="TCFD",
        title="TCFD Metrics and Targets",
        description="Metrics used to assess climate-related risks and opportunities.",
        metrics=["scope1_emissions", "scope2_emissions", "energy_consumption"],
    ),
    ComplianceRequirement(
        id="csrd-esrs-e1",
        framework="CSRD",
        title="ESRS E1: Climate Change",
        description="Energy consumption and mix, gross GHG emissions, transition plan.",
        metrics=["energy_consumption", "renewable_percentage"],
    ),
    ComplianceRequirement(
        id="sasb-em-mm",
        framework="SASB",
        title="SASB Metals & Mining",
        description="Water management, waste and tailings, workforce health and safety.",
        metrics=["water_usage", "waste_generated", "injuries"],
    ),
]


def _check_permission(user: User, permission: str) -> None:
    if not has_permission(user.role, permission):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Permission '{permission}' required",
        )


# ── Dashboard / generation ──────────────────────────────────────────
@router.get("/reports/dashboard-summary", response_model=DashboardSummaryResponse)
async def dashboard_summary(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(READ_DATA)),
) -> DashboardSummaryResponse:
    """Totals, per-dimension averages, per-year averages and latest records."""
    return DashboardSummaryResponse(data=await esg_store.dashboard_summary(db))


@router.get("/reports/types", response_model=ReportTypesResponse)
async def report_types() -> ReportTypesResponse:
    return ReportTypesResponse(data=REPORT_TYPES)


@router.post("/reports/generate", response_model=ReportResponse)
async def generate_report(
    body: ReportRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(READ_DATA)),
) -> ReportResponse:
    """Build a report of ``body.type`` from ``body.data``."""
    if body.type not in REPORT_TYPES:
        raise UnknownReportTypeError(body.type, REPORT_TYPES)

    data: dict[str, Any]
    if body.type == "comprehensive":
        data = (await esg_store.dashboard_summary(db, latest=20)).model_dump(mode="json")
    elif body.type == "performance":
        data = await esg_store.performance_report(db)
    else:
        _check_permission(current_user, CREATE_DATA)
        try:
            record_in = EsgDataCreate.model_validate(body.data)
        except ValidationError as exc:
            raise HTTPException(
                status_code=422, detail=exc.errors(include_url=False, include_context=False)
            ) from exc
        # Overwriting an existing company/year row is an update
        if await esg_store.find_record(db, record_in.company_name, record_in.year):
            _check_permission(current_user, UPDATE_DATA)
        record, created = await esg_store.upsert_record(db, record_in)
        data = {
            "record": EsgDataRead.model_validate(record).model_dump(mode="json"),
            "created": created,
        }

    logger.info("Report generated: %s by %s", body.type, current_user.email)
    return ReportResponse(type=body.type, data=data)


# ── Health / status ─────────────────────────────────────────────────
@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Public health check — database connectivity."""
    db_ok = False
    try:
        await db.execute(select(1))
        db_ok = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)

    return HealthResponse(
        status="ok" if db_ok else "degraded",
        message=f"{settings.PROJECT_NAME} API is running",
        db=db_ok,
        version=settings.VERSION,
    )


@router.get("/integrations/status", response_model=IntegrationStatusResponse)
async def integrations_status() -> IntegrationStatusResponse:
    """Which third-party connectors have credentials configured."""
    return IntegrationStatusResponse(
        integrations=[
            ConnectorStatus(
                name="pastel",
                configured=bool(settings.PASTEL_API_KEY),
                base_url=settings.PASTEL_BASE_URL,
            ),
            ConnectorStatus(
                name="sheq",
                configured=bool(settings.SHEQ_BASE_URL and settings.SHEQ_API_KEY),
                base_url=settings.SHEQ_BASE_URL,
            ),
        ]
    )


@router.get("/compliance/requirements", response_model=list[ComplianceRequirement])
async def compliance_requirements() -> list[ComplianceRequirement]:
    return COMPLIANCE_REQUIREMENTS
