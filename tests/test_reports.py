"""Tests for reporting, health and status endpoints."""

import pytest
from httpx import AsyncClient


def _record(company: str, year: int, score: float):
    return {
        "company_name": company,
        "year": year,
        "environmental_score": score,
        "social_score": score,
        "governance_score": score,
    }


@pytest.mark.asyncio
async def test_dashboard_summary_empty(async_client: AsyncClient):
    resp = await async_client.get("/api/reports/dashboard-summary")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total_records"] == 0
    assert data["averages"] is None
    assert data["by_year"] == []
    assert data["latest"] == []


@pytest.mark.asyncio
async def test_dashboard_summary_aggregates(async_client: AsyncClient):
    """Averages span every record; per-year rows are ordered by year."""
    await async_client.post("/api/esg-data", json=_record("A", 2023, 60))
    await async_client.post("/api/esg-data", json=_record("A", 2024, 80))
    await async_client.post("/api/esg-data", json=_record("B", 2024, 40))

    resp = await async_client.get("/api/reports/dashboard-summary")
    data = resp.json()["data"]
    assert resp.json()["success"] is True
    assert data["total_records"] == 3
    assert data["total_companies"] == 2
    assert data["averages"]["environmental"] == 60.0
    assert data["averages"]["overall"] == 60.0
    assert [y["year"] for y in data["by_year"]] == [2023, 2024]
    assert data["by_year"][1]["records"] == 2
    assert data["by_year"][1]["averages"]["social"] == 60.0
    assert data["latest"][0]["company_name"] == "B"


@pytest.mark.asyncio
async def test_report_types(anon_client: AsyncClient):
    resp = await anon_client.get("/api/reports/types")
    assert resp.status_code == 200
    assert resp.json()["data"] == ["comprehensive", "performance", "company"]


@pytest.mark.asyncio
async def test_generate_company_report_upserts(async_client: AsyncClient):
    """The company report writes the submitted record."""
    first = await async_client.post(
        "/api/reports/generate", json={"type": "company", "data": _record("Acme", 2024, 50)}
    )
    assert first.status_code == 200
    assert first.json()["data"]["created"] is True
    assert first.json()["data"]["record"]["sustainability_index"] == "Developing"

    second = await async_client.post(
        "/api/reports/generate", json={"type": "company", "data": _record("Acme", 2024, 85)}
    )
    assert second.json()["data"]["created"] is False
    assert second.json()["data"]["record"]["id"] == first.json()["data"]["record"]["id"]

    listing = await async_client.get("/api/esg-data")
    assert len(listing.json()) == 1


@pytest.mark.asyncio
async def test_generate_company_report_invalid_data(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/reports/generate", json={"type": "company", "data": {"company_name": "NoScores"}}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_viewer_cannot_generate_company_report(async_client: AsyncClient, as_role):
    as_role("user")
    resp = await async_client.post(
        "/api/reports/generate", json={"type": "company", "data": _record("Acme", 2024, 50)}
    )
    assert resp.status_code == 403

    read = await async_client.post("/api/reports/generate", json={"type": "comprehensive"})
    assert read.status_code == 200


@pytest.mark.asyncio
async def test_generate_performance_report(async_client: AsyncClient):
    await async_client.post("/api/esg-data", json=_record("Acme", 2022, 50))
    await async_client.post("/api/esg-data", json=_record("Acme", 2024, 70))

    resp = await async_client.post("/api/reports/generate", json={"type": "performance", "data": {}})
    assert resp.status_code == 200
    company = resp.json()["data"]["companies"][0]
    assert company["company_name"] == "Acme"
    assert [y["year"] for y in company["years"]] == [2022, 2024]
    assert company["change"] == 20.0


@pytest.mark.asyncio
async def test_generate_comprehensive_report(async_client: AsyncClient):
    await async_client.post("/api/esg-data", json=_record("Acme", 2024, 70))
    resp = await async_client.post("/api/reports/generate", json={"type": "comprehensive"})
    assert resp.status_code == 200
    assert resp.json()["type"] == "comprehensive"
    assert resp.json()["data"]["total_records"] == 1


@pytest.mark.asyncio
async def test_unknown_report_type(async_client: AsyncClient):
    resp = await async_client.post("/api/reports/generate", json={"type": "quarterly", "data": {}})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert "quarterly" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_dashboard_requires_auth(anon_client: AsyncClient):
    resp = await anon_client.get("/api/reports/dashboard-summary")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_health(anon_client: AsyncClient):
    resp = await anon_client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["db"] is True
    assert data["message"] == "ESGenius API is running"


@pytest.mark.asyncio
async def test_integrations_status(anon_client: AsyncClient):
    resp = await anon_client.get("/api/integrations/status")
    assert resp.status_code == 200
    names = [i["name"] for i in resp.json()["integrations"]]
    assert names == ["pastel", "sheq"]


@pytest.mark.asyncio
async def test_compliance_requirements(anon_client: AsyncClient):
    resp = await anon_client.get("/api/compliance/requirements")
    assert resp.status_code == 200
    frameworks = {r["framework"] for r in resp.json()}
    assert {"GRI", "TCFD", "CSRD", "SASB"} <= frameworks


@pytest.mark.asyncio
async def test_data_entry_cannot_overwrite_via_company_report(async_client: AsyncClient, as_role):
    """Creating through the company report is allowed; overwriting needs update rights."""
    as_role("data_entry")
    first = await async_client.post(
        "/api/reports/generate", json={"type": "company", "data": _record("Acme", 2024, 50)}
    )
    assert first.status_code == 200
    assert first.json()["data"]["created"] is True

    upsert = await async_client.put("/api/esg-data/upsert", json=_record("Acme", 2024, 90))
    assert upsert.status_code == 403
    overwrite = await async_client.post(
        "/api/reports/generate", json={"type": "company", "data": _record("Acme", 2024, 90)}
    )
    assert overwrite.status_code == 403

    stored = await async_client.get("/api/esg-data", params={"company_name": "Acme"})
    assert stored.json()[0]["environmental_score"] == 50


@pytest.mark.asyncio
async def test_supervisor_can_overwrite_via_company_report(async_client: AsyncClient, as_role):
    await async_client.post("/api/esg-data", json=_record("Acme", 2024, 50))
    as_role("supervisor")
    resp = await async_client.post(
        "/api/reports/generate", json={"type": "company", "data": _record("Acme", 2024, 90)}
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["created"] is False
    assert resp.json()["data"]["record"]["environmental_score"] == 90
