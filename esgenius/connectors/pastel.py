"""
Pastel ERP connector — financial totals and supplier spend.

Auth is an ``X-API-Key`` header; ``connect()`` posts the key and
company id to ``/api/auth``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from esgenius.connectors.base import (BaseConnector, ConnectorError, SyncResult,
                                      date_params)
from esgenius.connectors.models import (FinancialSummary,
                                        PastelFinancialPayload,
                                        PastelSupplierPayload, Supplier)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080/pastel"


def map_financial(payload: PastelFinancialPayload) -> FinancialSummary:
    return FinancialSummary(
        revenue=payload.total_revenue,
        expenses=payload.total_expenses,
        energy_costs=payload.utility_costs.electricity,
        water_costs=payload.utility_costs.water,
        waste_costs=payload.waste_mgmt_costs,
    )


def map_supplier(payload: PastelSupplierPayload) -> Supplier:
    return Supplier(
        id=payload.supplier_id,
        name=payload.supplier_name,
        category=payload.category,
        spend=payload.annual_spend,
    )


class PastelERPConnector(BaseConnector):
    name = "pastel"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        company_id: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(base_url or DEFAULT_BASE_URL, api_key, client)
        self.company_id = company_id

    def auth_headers(self) -> dict[str, str]:
        return {"X-API-Key": self.api_key} if self.api_key else {}

    def auth_body(self) -> dict[str, Any]:
        return {"apiKey": self.api_key, "companyId": self.company_id}

    async def _fetch_financial(
        self, start_date: str | None, end_date: str | None
    ) -> FinancialSummary:
        raw = await self.get_json("/api/financial", params=date_params(start_date, end_date))
        if not isinstance(raw, dict):
            raise ConnectorError("pastel financial payload is not an object")
        return map_financial(self.parse(PastelFinancialPayload, raw))

    async def _fetch_suppliers(self) -> list[Supplier]:
        raw = await self.get_json("/api/suppliers")
        if not isinstance(raw, list):
            raise ConnectorError("pastel supplier payload is not a list")
        suppliers = [map_supplier(self.parse(PastelSupplierPayload, s)) for s in raw]
        logger.info("pastel: %d suppliers synced", len(suppliers))
        return suppliers

    async def sync_financial_data(
        self, start_date: str | None = None, end_date: str | None = None
    ) -> SyncResult[FinancialSummary]:
        """Revenue, expenses and utility/waste costs; missing fields become 0."""
        return await self.guarded("financial", self._fetch_financial(start_date, end_date))

    async def sync_supplier_data(self) -> SyncResult[list[Supplier]]:
        return await self.guarded("suppliers", self._fetch_suppliers())


def pastel_from_settings() -> PastelERPConnector:
    from esgenius.core.config import settings

    return PastelERPConnector(
        base_url=settings.PASTEL_BASE_URL,
        api_key=settings.PASTEL_API_KEY,
        company_id=settings.PASTEL_COMPANY_ID,
    )
