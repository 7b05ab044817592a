"""
Seed the well-known super admin, supervisor and data-entry accounts.

    python -m esgenius.scripts.seed_users [--update-existing]

Existing accounts are skipped unless ``--update-existing`` is given. Each
account is reported separately; the exit code is 1 if any failed.
"""

from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.scripts._runner import run_db_script
from esgenius.services.provisioning import DEFAULT_SEED_ACCOUNTS, seed_users

logger = logging.getLogger("esgenius.scripts.seed_users")

_SYMBOLS = {"created": "✅", "updated": "✅", "skipped": "⚠️ ", "failed": "❌"}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed default ESGenius accounts")
    parser.add_argument(
        "--update-existing",
        action="store_true",
        help="refresh password and role of accounts that already exist",
    )
    args = parser.parse_args(argv)

    async def _action(session: AsyncSession) -> int:
        results = await seed_users(
            session, DEFAULT_SEED_ACCOUNTS, skip_existing=not args.update_existing
        )
        for result in results:
            suffix = f": {result.error}" if result.error else ""
            logger.info("%s %s %s%s", _SYMBOLS[result.outcome], result.outcome, result.email, suffix)
        return 0 if all(r.ok for r in results) else 1

    return run_db_script(_action)


if __name__ == "__main__":
    sys.exit(main())
