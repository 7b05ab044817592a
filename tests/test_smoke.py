"""Tests for the start-up smoke check."""

import httpx
import pytest
from httpx import ASGITransport

from esgenius.clients.smoke import HEALTH_PATH, CHECK_PATHS, run_smoke_test
from esgenius.main import app


@pytest.mark.asyncio
async def test_smoke_passes_against_app(session_factory):
    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        report = await run_smoke_test(client)
    assert report.server_up
    assert report.all_ok
    assert [p.path for p in report.checks] == [HEALTH_PATH, *CHECK_PATHS]
    assert report.checks[2].detail == "5 items"


@pytest.mark.asyncio
async def test_smoke_stops_when_server_down():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="http://localhost:3001") as client:
        report = await run_smoke_test(client)
    assert not report.server_up
    assert len(report.checks) == 1
    assert report.checks[0].detail == "ConnectError"


@pytest.mark.asyncio
async def test_smoke_reports_failing_check():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/compliance/requirements":
            return httpx.Response(500)
        return httpx.Response(200, json={"status": "ok"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://t") as client:
        report = await run_smoke_test(client)
    assert report.server_up
    assert not report.all_ok
    assert report.checks[-1].status_code == 500
