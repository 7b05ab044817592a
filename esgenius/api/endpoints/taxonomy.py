"""
Custom taxonomy endpoints — flat storage served as a tree.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.api.deps import (CREATE_DATA, DELETE_DATA, READ_DATA,
                               UPDATE_DATA, get_db, require_permission)
from esgenius.models.taxonomy import CustomTaxonomy
from esgenius.models.user import User
from esgenius.schemas.common import DeleteResponse
from esgenius.schemas.taxonomy import (FrameworkMapping, TaxonomyCreate,
                                       TaxonomyNode, TaxonomyRead,
                                       TaxonomyUpdate)
from esgenius.services import taxonomy as taxonomy_service

router = APIRouter(prefix="/taxonomies", tags=["taxonomy"])


async def _get_or_404(db: AsyncSession, taxonomy_id: int) -> CustomTaxonomy:
    node = await db.get(CustomTaxonomy, taxonomy_id)
    if node is None:
        raise HTTPException(status_code=404, detail="Taxonomy not found")
    return node


@router.post("", response_model=TaxonomyRead, status_code=201)
async def create_taxonomy(
    body: TaxonomyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission(CREATE_DATA)),
) -> CustomTaxonomy:
    return await taxonomy_service.create_taxonomy(db, body, created_by=current_user.id)


@router.get("", response_model=list[TaxonomyNode])
async def list_taxonomy_tree(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(READ_DATA)),
) -> list[TaxonomyNode]:
    """All taxonomies nested under their parents."""
    nodes = await taxonomy_service.list_taxonomies(db)
    return taxonomy_service.build_tree(nodes)


@router.get("/{taxonomy_id}", response_model=TaxonomyRead)
async def get_taxonomy(
    taxonomy_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(READ_DATA)),
) -> CustomTaxonomy:
    return await _get_or_404(db, taxonomy_id)


@router.put("/{taxonomy_id}", response_model=TaxonomyRead)
async def update_taxonomy(
    taxonomy_id: int,
    body: TaxonomyUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(UPDATE_DATA)),
) -> CustomTaxonomy:
    node = await _get_or_404(db, taxonomy_id)
    return await taxonomy_service.update_taxonomy(db, node, body)


@router.post("/{taxonomy_id}/map", response_model=TaxonomyRead)
async def map_taxonomy_to_framework(
    taxonomy_id: int,
    body: FrameworkMapping,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(UPDATE_DATA)),
) -> CustomTaxonomy:
    node = await _get_or_404(db, taxonomy_id)
    return await taxonomy_service.map_framework(db, node, body)


@router.delete("/{taxonomy_id}", response_model=DeleteResponse)
async def delete_taxonomy(
    taxonomy_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_permission(DELETE_DATA)),
) -> DeleteResponse:
    node = await _get_or_404(db, taxonomy_id)
    if await taxonomy_service.has_children(db, taxonomy_id):
        raise HTTPException(status_code=409, detail="Taxonomy has child nodes")
    await db.delete(node)
    await db.commit()
    return DeleteResponse(success=True, message=f"Taxonomy {taxonomy_id} deleted")
