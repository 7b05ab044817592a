"""
Reports API client — dashboard summary and report generation.

Neither call raises: a transport error or a non-2xx response is logged and
returned as ``{"success": False, "error": ...}``. State-changing requests
carry an ``X-CSRF-Token`` header when a token can be found in the page's
``<meta name="csrf-token">`` tag or a ``csrf-token`` cookie; a missing
token never blocks the request.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-CSRF-Token"
CSRF_COOKIE = "csrf-token"


def _meta_csrf_token(page_html: str) -> str | None:
    soup = BeautifulSoup(page_html, "html.parser")
    tag = soup.find("meta", attrs={"name": CSRF_COOKIE})
    content = tag.get("content") if tag else None
    return content or None


def get_csrf_token(
    page_html: str | None = None,
    cookies: Mapping[str, str] | httpx.Cookies | None = None,
) -> str | None:
    """Meta tag first, then the ``csrf-token`` cookie."""
    if page_html:
        token = _meta_csrf_token(page_html)
        if token:
            return token
    if cookies is not None:
        return cookies.get(CSRF_COOKIE) or None
    return None


def _failure(error: str) -> dict[str, Any]:
    return {"success": False, "error": error}


class ReportsAPIClient:
    """Async client for ``{base}/reports/*``.

    Usage:
        async with ReportsAPIClient("http://localhost:5000/api") as api:
            summary = await api.fetch_dashboard_summary()
            report = await api.generate_report("company", {...})
    """

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        page_html: str | None = None,
    ):
        if base_url is None:
            from esgenius.core.config import settings

            base_url = settings.REPORTS_API_BASE
        self.base_url = base_url.rstrip("/")
        self.page_html = page_html
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ReportsAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Reports API unavailable (%s %s): %s", method, path, exc)
            return _failure(str(exc))

        if not response.is_success:
            logger.warning("Reports API %s %s returned HTTP %s", method, path, response.status_code)
            return _failure(f"HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError:
            logger.warning("Reports API %s %s returned a non-JSON body", method, path)
            return _failure("invalid JSON response")

    async def fetch_dashboard_summary(self) -> dict[str, Any]:
        return await self._request("GET", "/reports/dashboard-summary")

    async def generate_report(self, report_type: str, data: dict[str, Any]) -> dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        csrf_token = get_csrf_token(self.page_html, self._client.cookies)
        if csrf_token:
            headers[CSRF_HEADER] = csrf_token
        return await self._request(
            "POST",
            "/reports/generate",
            json={"type": report_type, "data": data},
            headers=headers,
        )
