"""
Custom taxonomy tree — flat storage, parent ids resolved by lookup.

Parent links are validated on every write: the parent must exist and
following parents from it must never lead back to the node being written.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.core.exceptions import TaxonomyCycleError, TaxonomyError
from esgenius.models.taxonomy import CustomTaxonomy
from esgenius.schemas.taxonomy import (FrameworkMapping, TaxonomyCreate,
                                       TaxonomyNode, TaxonomyUpdate)

logger = logging.getLogger(__name__)


async def _parent_map(db: AsyncSession) -> dict[int, int | None]:
    result = await db.execute(select(CustomTaxonomy.id, CustomTaxonomy.parent_id))
    return {node_id: parent_id for node_id, parent_id in result.all()}


def find_cycle(parents: dict[int, int | None], node_id: int | None, parent_id: int | None) -> bool:
    """Return True if making ``parent_id`` the parent of ``node_id`` closes a loop.

    ``node_id`` is None for a node that does not exist yet.
    """
    seen: set[int] = set()
    current = parent_id
    while current is not None:
        if current == node_id or current in seen:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


async def validate_parent(db: AsyncSession, node_id: int | None, parent_id: int | None) -> None:
    if parent_id is None:
        return
    parents = await _parent_map(db)
    if parent_id not in parents:
        raise TaxonomyError(f"Parent taxonomy {parent_id} does not exist")
    if find_cycle(parents, node_id, parent_id):
        raise TaxonomyCycleError(
            f"Setting parent {parent_id} on taxonomy {node_id} would create a cycle"
        )


def build_tree(nodes: list[CustomTaxonomy]) -> list[TaxonomyNode]:
    """Assemble parent/child nesting from the flat node list."""
    index: dict[int, TaxonomyNode] = {
        node.id: TaxonomyNode.model_validate(node, from_attributes=True) for node in nodes
    }
    roots: list[TaxonomyNode] = []
    for node in sorted(index.values(), key=lambda n: n.id):
        parent = index.get(node.parent_id) if node.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots


async def create_taxonomy(db: AsyncSession, body: TaxonomyCreate, created_by: int) -> CustomTaxonomy:
    await validate_parent(db, None, body.parent_id)
    node = CustomTaxonomy(**body.model_dump(), created_by=created_by)
    db.add(node)
    await db.commit()
    await db.refresh(node)
    logger.info("Taxonomy %s created (%s/%s)", node.id, node.category, node.name)
    return node


async def list_taxonomies(db: AsyncSession) -> list[CustomTaxonomy]:
    result = await db.execute(select(CustomTaxonomy).order_by(CustomTaxonomy.id))
    return list(result.scalars().all())


async def update_taxonomy(
    db: AsyncSession, node: CustomTaxonomy, body: TaxonomyUpdate
) -> CustomTaxonomy:
    changes = body.model_dump(exclude_unset=True)
    if "parent_id" in changes:
        await validate_parent(db, node.id, changes["parent_id"])
    for field, value in changes.items():
        setattr(node, field, value)
    await db.commit()
    await db.refresh(node)
    return node


async def map_framework(
    db: AsyncSession, node: CustomTaxonomy, body: FrameworkMapping
) -> CustomTaxonomy:
    entry: dict[str, Any] = {
        "framework": body.framework,
        "mapping": body.mapping,
        "date": datetime.now(timezone.utc).isoformat(),
    }
    # Reassign so the JSON column is flagged dirty
    node.mapped_frameworks = [*(node.mapped_frameworks or []), entry]
    await db.commit()
    await db.refresh(node)
    logger.info("Taxonomy %s mapped to %s", node.id, body.framework)
    return node


async def has_children(db: AsyncSession, node_id: int) -> bool:
    result = await db.execute(
        select(CustomTaxonomy.id).where(CustomTaxonomy.parent_id == node_id).limit(1)
    )
    return result.first() is not None
