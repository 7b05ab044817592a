"""
Vendor payload shapes and the canonical shapes they map to.

Vendor models accept the third-party JSON field names through aliases and
default every numeric field to zero, so a payload with missing (or
explicitly null) fields still parses. Canonical models are what the rest
of the application sees.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _VendorModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# Pastel ERP vendor shapes
# =============================================================================

class PastelUtilityCosts(_VendorModel):
    electricity: float = 0
    water: float = 0

    @field_validator("electricity", "water", mode="before")
    @classmethod
    def _numeric_nulls(cls, v: Any) -> Any:
        return 0 if v is None else v


class PastelFinancialPayload(_VendorModel):
    total_revenue: float = Field(default=0, alias="totalRevenue")
    total_expenses: float = Field(default=0, alias="totalExpenses")
    utility_costs: PastelUtilityCosts = Field(
        default_factory=PastelUtilityCosts, alias="utilityCosts"
    )
    waste_mgmt_costs: float = Field(default=0, alias="wasteMgmtCosts")

    @field_validator("total_revenue", "total_expenses", "waste_mgmt_costs", mode="before")
    @classmethod
    def _numeric_nulls(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("utility_costs", mode="before")
    @classmethod
    def _missing_utilities(cls, v: Any) -> Any:
        return {} if v is None else v


class PastelSupplierPayload(_VendorModel):
    supplier_id: Optional[str] = Field(default=None, alias="supplierId")
    supplier_name: Optional[str] = Field(default=None, alias="supplierName")
    category: Optional[str] = None
    annual_spend: float = Field(default=0, alias="annualSpend")

    @field_validator("supplier_id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return None if v is None else str(v)

    @field_validator("annual_spend", mode="before")
    @classmethod
    def _spend_null(cls, v: Any) -> Any:
        return 0 if v is None else v


# =============================================================================
# SHEQ vendor shapes
# =============================================================================

class SHEQIncidentPayload(_VendorModel):
    incident_date: Optional[str] = Field(default=None, alias="incidentDate")
    incident_type: Optional[str] = Field(default=None, alias="incidentType")
    severity: Optional[str] = None
    description: Optional[str] = None
    injury_count: int = Field(default=0, alias="injuryCount")
    lost_time_days: float = Field(default=0, alias="lostTimeDays")

    @field_validator("injury_count", "lost_time_days", mode="before")
    @classmethod
    def _numeric_nulls(cls, v: Any) -> Any:
        return 0 if v is None else v


class SHEQTrainingPayload(_VendorModel):
    total_employees: int = Field(default=0, alias="totalEmployees")
    trained_count: int = Field(default=0, alias="trainedCount")
    total_hours: float = Field(default=0, alias="totalHours")

    @field_validator("total_employees", "trained_count", "total_hours", mode="before")
    @classmethod
    def _numeric_nulls(cls, v: Any) -> Any:
        return 0 if v is None else v


class SHEQEnvironmentalPayload(_VendorModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    energy_consumption: float = Field(default=0, alias="energyConsumption")
    water_usage: float = Field(default=0, alias="waterUsage")
    waste_generated: float = Field(default=0, alias="wasteGenerated")
    emissions: float = 0

    @field_validator("*", mode="before")
    @classmethod
    def _numeric_nulls(cls, v: Any) -> Any:
        return 0 if v is None else v


# =============================================================================
# Canonical shapes
# =============================================================================

class FinancialSummary(BaseModel):
    revenue: float = 0
    expenses: float = 0
    energy_costs: float = 0
    water_costs: float = 0
    waste_costs: float = 0


class Supplier(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    spend: float = 0


class SafetyIncident(BaseModel):
    date: Optional[str] = None
    type: Optional[str] = None
    severity: Optional[str] = None
    description: Optional[str] = None
    injuries: int = 0
    lost_time_days: float = 0


class TrainingSummary(BaseModel):
    total_employees: int = 0
    trained_employees: int = 0
    training_hours: float = 0
    compliance_rate: float = 0


class EnvironmentalData(BaseModel):
    energy_consumption: float = 0
    water_usage: float = 0
    waste_generated: float = 0
    emissions: float = 0
    extra: dict[str, Any] = Field(default_factory=dict)
