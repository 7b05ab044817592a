"""
Check a running server: health, integrations status, compliance requirements.

    python -m esgenius.scripts.smoke_test --base-url http://localhost:3001
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import httpx

from esgenius.clients.smoke import run_smoke_test
from esgenius.core.logging import configure_logging

logger = logging.getLogger("esgenius.scripts.smoke_test")


async def _run(base_url: str) -> int:
    async with httpx.AsyncClient(base_url=base_url) as client:
        report = await run_smoke_test(client)
    if not report.server_up:
        logger.error("Server not running. Start it with: uvicorn esgenius.main:app")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Smoke-test the ESGenius API")
    parser.add_argument("--base-url", default="http://localhost:3001")
    args = parser.parse_args(argv)
    configure_logging()
    return asyncio.run(_run(args.base_url))


if __name__ == "__main__":
    sys.exit(main())
