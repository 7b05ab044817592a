"""
Server-backed ``DataStore`` — entries become ``esg_data`` rows.

An entry must carry the score fields of an ESG record (snake_case or the
camelCase column names); saving upserts on (company, year).
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from esgenius.schemas.esg_data import EsgDataCreate, EsgDataRead
from esgenius.services import esg_store

logger = logging.getLogger(__name__)

_CAMEL_TO_FIELD = {
    "companyName": "company_name",
    "environmentalScore": "environmental_score",
    "socialScore": "social_score",
    "governanceScore": "governance_score",
    "complianceRate": "compliance_rate",
    "sustainabilityIndex": "sustainability_index",
}


def entry_to_record(entry: dict[str, Any]) -> EsgDataCreate:
    """Validate a free-form entry as an ESG record; raises ``ValidationError``."""
    values = {_CAMEL_TO_FIELD.get(key, key): value for key, value in entry.items()}
    return EsgDataCreate.model_validate(values)


class DatabaseDataStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def save_data(self, entry: dict[str, Any]) -> dict[str, Any]:
        record_in = entry_to_record(entry)
        async with self.session_factory() as session:
            record, created = await esg_store.upsert_record(session, record_in)
            stored = EsgDataRead.model_validate(record).model_dump(mode="json")
        logger.debug("Entry for %s/%s %s", record_in.company_name, record_in.year,
                     "created" if created else "updated")
        return stored

    async def get_stored_data(self) -> list[dict[str, Any]]:
        async with self.session_factory() as session:
            records = await esg_store.list_records(session, limit=10_000)
            return [EsgDataRead.model_validate(r).model_dump(mode="json") for r in records]
