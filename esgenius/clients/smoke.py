"""
Start-up smoke test — confirms the API answers on its public endpoints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

logger = logging.getLogger(__name__)

HEALTH_PATH = "/api/health"
CHECK_PATHS = ("/api/integrations/status", "/api/compliance/requirements")


@dataclass
class CheckResult:
    path: str
    ok: bool
    status_code: int | None = None
    detail: str = ""


@dataclass
class SmokeReport:
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def server_up(self) -> bool:
        return bool(self.checks) and self.checks[0].ok

    @property
    def all_ok(self) -> bool:
        return all(p.ok for p in self.checks)


async def _check(client: httpx.AsyncClient, path: str) -> CheckResult:
    try:
        response = await client.get(path)
    except httpx.HTTPError as exc:
        logger.error("❌ %s unreachable: %s", path, exc)
        return CheckResult(path, ok=False, detail=type(exc).__name__)

    if not response.is_success:
        logger.error("❌ %s failed: HTTP %s", path, response.status_code)
        return CheckResult(path, ok=False, status_code=response.status_code)

    try:
        body = response.json()
    except ValueError:
        logger.error("❌ %s returned a non-JSON body", path)
        return CheckResult(path, ok=False, status_code=response.status_code, detail="invalid JSON")
    detail = f"{len(body)} items" if isinstance(body, list) else ""
    logger.info("✅ %s ok %s", path, detail)
    return CheckResult(path, ok=True, status_code=response.status_code, detail=detail)


async def run_smoke_test(client: httpx.AsyncClient) -> SmokeReport:
    """Check health first; the remaining routes only if the server is up.

    ``client`` must carry the server base URL.
    """
    report = SmokeReport()
    report.checks.append(await _check(client, HEALTH_PATH))
    if not report.server_up:
        logger.error("Server not running at %s", client.base_url)
        return report
    for path in CHECK_PATHS:
        report.checks.append(await _check(client, path))
    return report
