"""
Pull data from the configured Pastel ERP and SHEQ systems and print the
normalised result as JSON.

    python -m esgenius.scripts.sync_integrations [--pastel] [--sheq]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, TypeVar

from esgenius.connectors.base import ConnectorError, SyncResult
from esgenius.connectors.pastel import pastel_from_settings
from esgenius.connectors.sheq import sheq_from_settings
from esgenius.core.logging import configure_logging

logger = logging.getLogger("esgenius.scripts.sync_integrations")

T = TypeVar("T")


def _unwrap(result: SyncResult[T]) -> T:
    if not result.success:
        raise ConnectorError(result.error or "sync failed", status_code=result.status_code)
    return result.data  # type: ignore[return-value]


async def sync_pastel() -> dict[str, Any]:
    async with pastel_from_settings() as pastel:
        if not await pastel.connect():
            raise ConnectorError("pastel authentication failed")
        financial = _unwrap(await pastel.sync_financial_data())
        suppliers = _unwrap(await pastel.sync_supplier_data())
    return {
        "financial": financial.model_dump(),
        "suppliers": [s.model_dump() for s in suppliers],
    }


async def sync_sheq() -> dict[str, Any]:
    async with sheq_from_settings() as sheq:
        incidents = _unwrap(await sheq.sync_safety_incidents())
        training = _unwrap(await sheq.sync_training_records())
        environmental = _unwrap(await sheq.sync_environmental_data())
    return {
        "incidents": [i.model_dump() for i in incidents],
        "training": training.model_dump(),
        "environmental": environmental.model_dump(),
    }


async def _run(pastel: bool, sheq: bool) -> int:
    output: dict[str, Any] = {}
    failed = False
    for name, enabled, sync in (("pastel", pastel, sync_pastel), ("sheq", sheq, sync_sheq)):
        if not enabled:
            continue
        try:
            output[name] = await sync()
        except ConnectorError as exc:
            logger.error("❌ %s sync failed: %s", name, exc)
            failed = True
    print(json.dumps(output, indent=2))
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sync third-party ESG sources")
    parser.add_argument("--pastel", action="store_true")
    parser.add_argument("--sheq", action="store_true")
    args = parser.parse_args(argv)
    configure_logging()
    both = not (args.pastel or args.sheq)
    return asyncio.run(_run(args.pastel or both, args.sheq or both))


if __name__ == "__main__":
    sys.exit(main())
