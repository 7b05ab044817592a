"""
ESG data endpoints — per-company, per-year score records.

``POST`` is a strict insert (duplicate company/year → 409 through the
global IntegrityError handler); ``PUT /esg-data/upsert`` inserts or updates.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.api.deps import (CREATE_DATA, DELETE_DATA, READ_DATA,
                               UPDATE_DATA, get_db, require_permission)
from esgenius.models.esg_data import EsgDataRecord
from esgenius.models.user import User
from esgenius.schemas.common import DeleteResponse
from esgenius.schemas.esg_data import EsgDataCreate, EsgDataRead, EsgDataUpdate
from esgenius.services import esg_store

router = APIRouter(prefix="/esg-data", tags=["esg-data"])


async def _get_or_404(db: AsyncSession, record_id: int) -> EsgDataRecord:
    record = await esg_store.get_record(db, record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="ESG record not found")
    return record


@router.get("", response_model=list[EsgDataRead])
async def list_esg_data(
    company_name: str | None = None,
    year: int | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(READ_DATA)),
) -> list[EsgDataRecord]:
    """List records, newest first, optionally filtered by company and year."""
    return await esg_store.list_records(db, company_name, year, skip, limit)


@router.post("", response_model=EsgDataRead, status_code=201)
async def create_esg_data(
    body: EsgDataCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(CREATE_DATA)),
) -> EsgDataRecord:
    return await esg_store.create_record(db, body)


@router.put("/upsert", response_model=EsgDataRead)
async def upsert_esg_data(
    body: EsgDataCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(UPDATE_DATA)),
) -> EsgDataRecord:
    record, created = await esg_store.upsert_record(db, body)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return record


@router.get("/{record_id}", response_model=EsgDataRead)
async def get_esg_data(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(READ_DATA)),
) -> EsgDataRecord:
    return await _get_or_404(db, record_id)


@router.put("/{record_id}", response_model=EsgDataRead)
async def update_esg_data(
    record_id: int,
    body: EsgDataUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(UPDATE_DATA)),
) -> EsgDataRecord:
    record = await _get_or_404(db, record_id)
    return await esg_store.update_record(db, record, body)


@router.delete("/{record_id}", response_model=DeleteResponse)
async def delete_esg_data(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(DELETE_DATA)),
) -> DeleteResponse:
    record = await _get_or_404(db, record_id)
    await esg_store.delete_record(db, record)
    return DeleteResponse(success=True, message=f"ESG record {record_id} deleted")
