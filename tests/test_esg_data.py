"""Tests for ESG data CRUD endpoints and the store beneath them."""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.schemas.esg_data import EsgDataCreate
from esgenius.services import esg_store


def _payload(company: str = "Acme Mining", year: int = 2024, **overrides):
    body = {
        "company_name": company,
        "year": year,
        "environmental_score": 72.5,
        "social_score": 65.0,
        "governance_score": 80.0,
        "compliance_rate": 91.0,
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_esg_record(async_client: AsyncClient):
    """POST /esg-data should insert a record and derive the index."""
    resp = await async_client.post("/api/esg-data", json=_payload())
    assert resp.status_code == 201
    data = resp.json()
    assert data["id"] is not None
    assert data["company_name"] == "Acme Mining"
    assert data["sustainability_index"] == "Advanced"
    assert data["created_at"] is not None


@pytest.mark.asyncio
async def test_duplicate_company_year_rejected(async_client: AsyncClient):
    """A second insert for the same company and year is a conflict."""
    await async_client.post("/api/esg-data", json=_payload())
    resp = await async_client.post("/api/esg-data", json=_payload(social_score=10))
    assert resp.status_code == 409
    assert resp.json()["success"] is False

    listing = await async_client.get("/api/esg-data", params={"company_name": "Acme Mining"})
    assert len(listing.json()) == 1
    assert listing.json()[0]["social_score"] == 65.0


@pytest.mark.asyncio
async def test_same_company_different_year_allowed(async_client: AsyncClient):
    await async_client.post("/api/esg-data", json=_payload(year=2023))
    resp = await async_client.post("/api/esg-data", json=_payload(year=2024))
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_score_out_of_range_rejected(async_client: AsyncClient):
    resp = await async_client.post("/api/esg-data", json=_payload(environmental_score=120))
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_upsert_creates_then_updates(async_client: AsyncClient):
    """PUT /esg-data/upsert inserts once, then updates the same row."""
    first = await async_client.put("/api/esg-data/upsert", json=_payload())
    assert first.status_code == 201

    second = await async_client.put(
        "/api/esg-data/upsert", json=_payload(environmental_score=90, social_score=90, governance_score=90)
    )
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["sustainability_index"] == "Leader"


@pytest.mark.asyncio
async def test_list_filters_by_year(async_client: AsyncClient):
    await async_client.post("/api/esg-data", json=_payload("A Corp", 2022))
    await async_client.post("/api/esg-data", json=_payload("B Corp", 2022))
    await async_client.post("/api/esg-data", json=_payload("A Corp", 2023))

    resp = await async_client.get("/api/esg-data", params={"year": 2022})
    assert resp.status_code == 200
    assert {r["company_name"] for r in resp.json()} == {"A Corp", "B Corp"}


@pytest.mark.asyncio
async def test_list_newest_first(async_client: AsyncClient):
    await async_client.post("/api/esg-data", json=_payload("First", 2022))
    await async_client.post("/api/esg-data", json=_payload("Second", 2022))
    resp = await async_client.get("/api/esg-data")
    assert [r["company_name"] for r in resp.json()] == ["Second", "First"]


@pytest.mark.asyncio
async def test_get_record_not_found(async_client: AsyncClient):
    resp = await async_client.get("/api/esg-data/9999")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_rederives_index(async_client: AsyncClient):
    """Changing scores without an explicit index recomputes it."""
    create = await async_client.post("/api/esg-data", json=_payload())
    rid = create.json()["id"]
    resp = await async_client.put(
        f"/api/esg-data/{rid}",
        json={"environmental_score": 10, "social_score": 10, "governance_score": 10},
    )
    assert resp.status_code == 200
    assert resp.json()["sustainability_index"] == "Lagging"


@pytest.mark.asyncio
async def test_delete_record(async_client: AsyncClient):
    create = await async_client.post("/api/esg-data", json=_payload())
    rid = create.json()["id"]
    resp = await async_client.delete(f"/api/esg-data/{rid}")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert (await async_client.get(f"/api/esg-data/{rid}")).status_code == 404


@pytest.mark.asyncio
async def test_data_entry_cannot_delete(async_client: AsyncClient, as_role):
    create = await async_client.post("/api/esg-data", json=_payload())
    as_role("data_entry")
    resp = await async_client.delete(f"/api/esg-data/{create.json()['id']}")
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_viewer_cannot_create(async_client: AsyncClient, as_role):
    as_role("user")
    resp = await async_client.post("/api/esg-data", json=_payload())
    assert resp.status_code == 403
    assert (await async_client.get("/api/esg-data")).status_code == 200


@pytest.mark.asyncio
async def test_anonymous_read_rejected(anon_client: AsyncClient):
    resp = await anon_client.get("/api/esg-data")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_store_create_raises_on_duplicate(db_session):
    body = EsgDataCreate(**_payload())
    await esg_store.create_record(db_session, body)
    with pytest.raises(IntegrityError):
        await esg_store.create_record(db_session, body)
    assert len(await esg_store.list_records(db_session)) == 1


@pytest.mark.parametrize(
    "scores,expected",
    [
        ((80, 80, 80), "Leader"),
        ((60, 60, 60), "Advanced"),
        ((40, 40, 40), "Developing"),
        ((39.9, 40, 40), "Lagging"),
    ],
)
def test_derive_sustainability_index(scores, expected):
    assert esg_store.derive_sustainability_index(*scores) == expected


@pytest.mark.asyncio
async def test_update_null_score_rejected(async_client: AsyncClient):
    """An explicit null score is a validation error and leaves the row intact."""
    create = await async_client.post("/api/esg-data", json=_payload())
    rid = create.json()["id"]
    resp = await async_client.put(f"/api/esg-data/{rid}", json={"environmental_score": None})
    assert resp.status_code == 422

    unchanged = await async_client.get(f"/api/esg-data/{rid}")
    assert unchanged.json()["environmental_score"] == 72.5


@pytest.mark.asyncio
async def test_update_clears_compliance_rate(async_client: AsyncClient):
    create = await async_client.post("/api/esg-data", json=_payload())
    resp = await async_client.put(
        f"/api/esg-data/{create.json()['id']}", json={"compliance_rate": None}
    )
    assert resp.status_code == 200
    assert resp.json()["compliance_rate"] is None
    assert resp.json()["sustainability_index"] == "Advanced"


@pytest.mark.asyncio
async def test_upsert_update_rolls_back_failed_commit(db_session, monkeypatch):
    """A failed commit on the update branch leaves the stored row unchanged."""
    await esg_store.create_record(db_session, EsgDataCreate(**_payload()))

    async def _locked(self):
        raise OperationalError("UPDATE esg_data", {}, Exception("database is locked"))

    monkeypatch.setattr(AsyncSession, "commit", _locked)
    with pytest.raises(OperationalError):
        await esg_store.upsert_record(db_session, EsgDataCreate(**_payload(social_score=1)))
    monkeypatch.undo()

    record = await esg_store.find_record(db_session, "Acme Mining", 2024)
    assert record.social_score == 65.0
