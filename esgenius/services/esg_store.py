"""
ESG data store — CRUD and dashboard aggregation over ``esg_data``.

Inserts rely on the ``(companyName, year)`` unique constraint: a second
``create_record`` for the same pair raises ``IntegrityError``. Callers that
want insert-or-update semantics use ``upsert_record``.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.models.esg_data import EsgDataRecord
from esgenius.schemas.esg_data import (DashboardSummary, EsgDataCreate,
                                       EsgDataRead, EsgDataUpdate,
                                       ScoreAverages, YearAverage)

logger = logging.getLogger(__name__)

_INDEX_BANDS = ((80.0, "Leader"), (60.0, "Advanced"), (40.0, "Developing"))


def derive_sustainability_index(environmental: float, social: float, governance: float) -> str:
    """Map the mean of the three dimension scores to a label."""
    mean = (environmental + social + governance) / 3
    for floor, label in _INDEX_BANDS:
        if mean >= floor:
            return label
    return "Lagging"


def _averages(env: float, soc: float, gov: float) -> ScoreAverages:
    return ScoreAverages(
        environmental=round(env, 2),
        social=round(soc, 2),
        governance=round(gov, 2),
        overall=round((env + soc + gov) / 3, 2),
    )


def _fill_index(values: dict[str, Any]) -> dict[str, Any]:
    if not values.get("sustainability_index"):
        values["sustainability_index"] = derive_sustainability_index(
            values["environmental_score"],
            values["social_score"],
            values["governance_score"],
        )
    return values


# ── Reads ───────────────────────────────────────────────────────────
async def get_record(db: AsyncSession, record_id: int) -> EsgDataRecord | None:
    return await db.get(EsgDataRecord, record_id)


async def find_record(db: AsyncSession, company_name: str, year: int) -> EsgDataRecord | None:
    result = await db.execute(
        select(EsgDataRecord).where(
            EsgDataRecord.company_name == company_name,
            EsgDataRecord.year == year,
        )
    )
    return result.scalar_one_or_none()


async def list_records(
    db: AsyncSession,
    company_name: str | None = None,
    year: int | None = None,
    skip: int = 0,
    limit: int = 100,
) -> list[EsgDataRecord]:
    query = select(EsgDataRecord)
    if company_name is not None:
        query = query.where(EsgDataRecord.company_name == company_name)
    if year is not None:
        query = query.where(EsgDataRecord.year == year)
    query = query.order_by(EsgDataRecord.created_at.desc(), EsgDataRecord.id.desc())
    result = await db.execute(query.offset(skip).limit(limit))
    return list(result.scalars().all())


# ── Writes ──────────────────────────────────────────────────────────
async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise


async def create_record(db: AsyncSession, body: EsgDataCreate) -> EsgDataRecord:
    """Insert a new record. Duplicate (company, year) raises ``IntegrityError``."""
    record = EsgDataRecord(**_fill_index(body.model_dump()))
    db.add(record)
    await _commit(db)
    await db.refresh(record)
    logger.info("ESG record created: %s/%s (id=%s)", record.company_name, record.year, record.id)
    return record


async def upsert_record(db: AsyncSession, body: EsgDataCreate) -> tuple[EsgDataRecord, bool]:
    """Insert or update keyed by (company, year). Returns ``(record, created)``."""
    record = await find_record(db, body.company_name, body.year)
    if record is None:
        return await create_record(db, body), True

    values = _fill_index(body.model_dump(exclude={"company_name", "year"}))
    for field, value in values.items():
        setattr(record, field, value)
    await _commit(db)
    await db.refresh(record)
    logger.info("ESG record updated: %s/%s (id=%s)", record.company_name, record.year, record.id)
    return record, False


async def update_record(
    db: AsyncSession, record: EsgDataRecord, body: EsgDataUpdate
) -> EsgDataRecord:
    changes = body.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(record, field, value)
    if "sustainability_index" not in changes and changes:
        record.sustainability_index = derive_sustainability_index(
            record.environmental_score, record.social_score, record.governance_score
        )
    await _commit(db)
    await db.refresh(record)
    logger.info("ESG record %s updated: %s", record.id, sorted(changes))
    return record


async def delete_record(db: AsyncSession, record: EsgDataRecord) -> None:
    await db.delete(record)
    await _commit(db)
    logger.info("ESG record %s deleted", record.id)


# ── Dashboard ───────────────────────────────────────────────────────
async def dashboard_summary(db: AsyncSession, latest: int = 5) -> DashboardSummary:
    """Aggregate counts and per-dimension averages over every record."""
    totals = (
        await db.execute(
            select(
                func.count(EsgDataRecord.id),
                func.count(func.distinct(EsgDataRecord.company_name)),
                func.avg(EsgDataRecord.environmental_score),
                func.avg(EsgDataRecord.social_score),
                func.avg(EsgDataRecord.governance_score),
            )
        )
    ).one()
    total_records, total_companies, env, soc, gov = totals

    per_year = await db.execute(
        select(
            EsgDataRecord.year,
            func.count(EsgDataRecord.id),
            func.avg(EsgDataRecord.environmental_score),
            func.avg(EsgDataRecord.social_score),
            func.avg(EsgDataRecord.governance_score),
        )
        .group_by(EsgDataRecord.year)
        .order_by(EsgDataRecord.year)
    )
    by_year = [
        YearAverage(year=year, records=count, averages=_averages(y_env, y_soc, y_gov))
        for year, count, y_env, y_soc, y_gov in per_year.all()
    ]

    recent = await list_records(db, limit=latest)
    return DashboardSummary(
        total_records=total_records,
        total_companies=total_companies,
        averages=_averages(env, soc, gov) if total_records else None,
        by_year=by_year,
        latest=[EsgDataRead.model_validate(r) for r in recent],
    )


async def performance_report(db: AsyncSession) -> dict[str, Any]:
    """Per-company score trajectory across years."""
    result = await db.execute(
        select(EsgDataRecord).order_by(EsgDataRecord.company_name, EsgDataRecord.year)
    )
    companies: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for record in result.scalars().all():
        companies[record.company_name].append(
            {
                "year": record.year,
                "overall": round(
                    (record.environmental_score + record.social_score + record.governance_score) / 3,
                    2,
                ),
                "sustainability_index": record.sustainability_index,
            }
        )

    performance = []
    for name, points in companies.items():
        change = round(points[-1]["overall"] - points[0]["overall"], 2)
        performance.append({"company_name": name, "years": points, "change": change})
    return {"companies": performance}
