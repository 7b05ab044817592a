"""
Shared plumbing for the one-shot command-line scripts.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.core.logging import configure_logging
from esgenius.db.session import async_session_factory, engine, init_models

logger = logging.getLogger(__name__)


async def _with_session(action: Callable[[AsyncSession], Awaitable[int]]) -> int:
    try:
        logger.info("Initializing database...")
        await init_models()
        async with async_session_factory() as session:
            return await action(session)
    finally:
        await engine.dispose()


def run_db_script(action: Callable[[AsyncSession], Awaitable[int]]) -> int:
    """Run ``action`` against a fresh session; any unhandled error exits 1."""
    configure_logging()
    try:
        return asyncio.run(_with_session(action))
    except Exception as exc:  # noqa: BLE001
        logger.error("❌ %s: %s", type(exc).__name__, exc)
        return 1
