"""
Base class for third-party ERP / SHEQ connectors.

A connector owns one ``httpx.AsyncClient`` bound to the vendor base URL.
``connect()`` never raises: failures are logged and reported as ``False``.
Sync calls make exactly one GET with no retry or pagination. Transport
errors, non-2xx responses, undecodable JSON and unexpected payload shapes
are raised internally as ``ConnectorError`` and surfaced to the caller as a
failed ``SyncResult``; public sync methods never raise.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)
T = TypeVar("T")


class ConnectorError(Exception):
    """A vendor call failed (transport, HTTP status or payload)."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class SyncResult(Generic[T]):
    """Outcome of one sync call: ``data`` on success, ``error`` otherwise."""

    success: bool
    data: T | None = None
    error: str | None = None
    status_code: int = 0


class BaseConnector:
    name = "connector"

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = client
        self._owns_client = client is None

    # ── Lifecycle ───────────────────────────────────────────────────
    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ── Vendor specifics ────────────────────────────────────────────
    def auth_headers(self) -> dict[str, str]:
        raise NotImplementedError

    def auth_body(self) -> dict[str, Any]:
        return {"apiKey": self.api_key}

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    # ── Calls ───────────────────────────────────────────────────────
    async def connect(self) -> bool:
        """Authenticate against ``{base}/api/auth``. Returns success, never raises."""
        try:
            response = await self.client.post(
                self.url("/api/auth"),
                json=self.auth_body(),
                headers=self.auth_headers(),
            )
        except httpx.HTTPError as exc:
            logger.error("%s connection failed: %s", self.name, exc)
            return False
        if not response.is_success:
            logger.error("%s authentication rejected: HTTP %s", self.name, response.status_code)
            return False
        logger.info("%s connected (%s)", self.name, self.base_url)
        return True

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = self.url(path)
        try:
            response = await self.client.get(url, headers=self.auth_headers(), params=params)
        except httpx.HTTPError as exc:
            logger.error("%s GET %s failed: %s", self.name, path, exc)
            raise ConnectorError(f"{self.name} request to {path} failed: {exc}") from exc

        if not response.is_success:
            logger.error("%s GET %s returned HTTP %s", self.name, path, response.status_code)
            raise ConnectorError(
                f"{self.name} GET {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorError(f"{self.name} GET {path} returned invalid JSON") from exc

    def parse(self, model: type[PayloadT], raw: Any) -> PayloadT:
        """Validate one vendor payload item against its typed shape."""
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            logger.error("%s payload rejected by %s: %s", self.name, model.__name__, exc)
            raise ConnectorError(f"{self.name} returned an unexpected payload shape") from exc

    async def guarded(self, operation: str, call: Awaitable[T]) -> SyncResult[T]:
        """Await ``call`` and report a ``ConnectorError`` as a failed result."""
        try:
            data = await call
        except ConnectorError as exc:
            logger.warning("%s %s sync failed: %s", self.name, operation, exc)
            return SyncResult(success=False, error=str(exc), status_code=exc.status_code)
        return SyncResult(success=True, data=data)


def date_params(start_date: str | None, end_date: str | None) -> dict[str, str] | None:
    params = {
        key: value
        for key, value in (("startDate", start_date), ("endDate", end_date))
        if value
    }
    return params or None
