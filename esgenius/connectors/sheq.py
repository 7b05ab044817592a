"""
SHEQ (safety, health, environment, quality) connector.

Auth is an ``Authorization: Bearer`` header carrying the API key.
"""

from __future__ import annotations

import logging

from esgenius.connectors.base import (BaseConnector, ConnectorError, SyncResult,
                                      date_params)
from esgenius.connectors.models import (EnvironmentalData, SafetyIncident,
                                        SHEQEnvironmentalPayload,
                                        SHEQIncidentPayload,
                                        SHEQTrainingPayload, TrainingSummary)

logger = logging.getLogger(__name__)


def map_incident(payload: SHEQIncidentPayload) -> SafetyIncident:
    return SafetyIncident(
        date=payload.incident_date,
        type=payload.incident_type,
        severity=payload.severity,
        description=payload.description,
        injuries=payload.injury_count,
        lost_time_days=payload.lost_time_days,
    )


def map_training(payload: SHEQTrainingPayload) -> TrainingSummary:
    rate = 0.0
    if payload.total_employees:
        rate = round(payload.trained_count / payload.total_employees * 100, 2)
    return TrainingSummary(
        total_employees=payload.total_employees,
        trained_employees=payload.trained_count,
        training_hours=payload.total_hours,
        compliance_rate=rate,
    )


def map_environmental(payload: SHEQEnvironmentalPayload) -> EnvironmentalData:
    return EnvironmentalData(
        energy_consumption=payload.energy_consumption,
        water_usage=payload.water_usage,
        waste_generated=payload.waste_generated,
        emissions=payload.emissions,
        extra=dict(payload.model_extra or {}),
    )


class SHEQConnector(BaseConnector):
    name = "sheq"

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

    async def _fetch_incidents(
        self, start_date: str | None, end_date: str | None
    ) -> list[SafetyIncident]:
        raw = await self.get_json("/api/incidents", params=date_params(start_date, end_date))
        if not isinstance(raw, list):
            raise ConnectorError("sheq incident payload is not a list")
        incidents = [map_incident(self.parse(SHEQIncidentPayload, i)) for i in raw]
        logger.info("sheq: %d incidents synced", len(incidents))
        return incidents

    async def _fetch_training(self) -> TrainingSummary:
        raw = await self.get_json("/api/training")
        if not isinstance(raw, dict):
            raise ConnectorError("sheq training payload is not an object")
        return map_training(self.parse(SHEQTrainingPayload, raw))

    async def _fetch_environmental(self) -> EnvironmentalData:
        raw = await self.get_json("/api/environmental")
        if not isinstance(raw, dict):
            raise ConnectorError("sheq environmental payload is not an object")
        return map_environmental(self.parse(SHEQEnvironmentalPayload, raw))

    async def sync_safety_incidents(
        self, start_date: str | None = None, end_date: str | None = None
    ) -> SyncResult[list[SafetyIncident]]:
        return await self.guarded("incidents", self._fetch_incidents(start_date, end_date))

    async def sync_training_records(self) -> SyncResult[TrainingSummary]:
        """Training totals; compliance rate is trained / total as a percentage."""
        return await self.guarded("training", self._fetch_training())

    async def sync_environmental_data(self) -> SyncResult[EnvironmentalData]:
        return await self.guarded("environmental", self._fetch_environmental())


def sheq_from_settings() -> SHEQConnector:
    from esgenius.core.config import settings

    if not settings.SHEQ_BASE_URL:
        raise ConnectorError("SHEQ_BASE_URL is not configured")
    return SHEQConnector(settings.SHEQ_BASE_URL, settings.SHEQ_API_KEY)
