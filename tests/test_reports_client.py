"""Tests for the reports API client."""

import json

import httpx
import pytest

from esgenius.clients.reports_api import (CSRF_HEADER, ReportsAPIClient,
                                          get_csrf_token)

BASE = "http://reports.test/api"


def _recording_client(seen: list, status: int = 200, body=None, **kwargs) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, json=body if body is not None else {"success": True})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_fetch_dashboard_summary_returns_body():
    seen: list = []
    body = {"success": True, "data": {"total_records": 3}}
    async with ReportsAPIClient(BASE, client=_recording_client(seen, body=body)) as api:
        result = await api.fetch_dashboard_summary()
    assert result == body
    assert seen[0].method == "GET"
    assert str(seen[0].url) == f"{BASE}/reports/dashboard-summary"


@pytest.mark.asyncio
async def test_server_error_returns_failure():
    seen: list = []
    async with ReportsAPIClient(BASE, client=_recording_client(seen, status=500)) as api:
        result = await api.fetch_dashboard_summary()
    assert result["success"] is False
    assert "500" in result["error"]


@pytest.mark.asyncio
async def test_unreachable_server_returns_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    async with ReportsAPIClient(BASE, client=client) as api:
        result = await api.generate_report("comprehensive", {})
    assert result["success"] is False
    assert result["error"]


@pytest.mark.asyncio
async def test_generate_report_posts_type_and_data():
    seen: list = []
    async with ReportsAPIClient(BASE, client=_recording_client(seen)) as api:
        await api.generate_report("company", {"company_name": "Acme"})
    request = seen[0]
    assert request.method == "POST"
    assert json.loads(request.content) == {"type": "company", "data": {"company_name": "Acme"}}
    assert CSRF_HEADER not in request.headers


@pytest.mark.asyncio
async def test_csrf_header_from_meta_tag():
    seen: list = []
    page = '<html><head><meta name="csrf-token" content="meta-tok"></head></html>'
    async with ReportsAPIClient(BASE, client=_recording_client(seen), page_html=page) as api:
        await api.generate_report("performance", {})
    assert seen[0].headers[CSRF_HEADER] == "meta-tok"


@pytest.mark.asyncio
async def test_csrf_header_from_cookie():
    seen: list = []
    client = _recording_client(seen, cookies={"csrf-token": "cookie-tok"})
    async with ReportsAPIClient(BASE, client=client) as api:
        await api.generate_report("performance", {})
    assert seen[0].headers[CSRF_HEADER] == "cookie-tok"


def test_meta_tag_wins_over_cookie():
    page = "<meta content='from-meta' name='csrf-token'/>"
    assert get_csrf_token(page, {"csrf-token": "from-cookie"}) == "from-meta"
    assert get_csrf_token("<meta name='other' content='x'>", {"csrf-token": "from-cookie"}) == "from-cookie"
    assert get_csrf_token(None, {}) is None


def test_meta_tag_unquoted_attributes():
    assert get_csrf_token("<meta name=csrf-token content=abc123>") == "abc123"


def test_meta_tag_value_containing_angle_bracket():
    assert get_csrf_token('<meta name="csrf-token" content="a>b">') == "a>b"


def test_meta_tag_without_content_falls_back_to_cookie():
    assert get_csrf_token('<meta name="csrf-token">', {"csrf-token": "c"}) == "c"
