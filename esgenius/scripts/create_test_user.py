"""
Create or refresh a single pre-approved account.

    python -m esgenius.scripts.create_test_user
    python -m esgenius.scripts.create_test_user --email me@corp.com --role supervisor

The password comes from ``--password`` or ``ESG_SEED_PASSWORD`` and falls
back to the local development default. It is never printed.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.schemas.user import VALID_ROLES
from esgenius.scripts._runner import run_db_script
from esgenius.services.provisioning import TEST_ACCOUNT, AccountSpec, provision_user

logger = logging.getLogger("esgenius.scripts.create_test_user")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--email", default=TEST_ACCOUNT.email)
    parser.add_argument(
        "--password",
        default=os.environ.get("ESG_SEED_PASSWORD", TEST_ACCOUNT.password),
    )
    parser.add_argument("--full-name", default=TEST_ACCOUNT.full_name)
    parser.add_argument("--role", default=TEST_ACCOUNT.role, choices=sorted(VALID_ROLES))
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    account = AccountSpec(args.email, args.password, args.full_name, args.role)

    async def _action(session: AsyncSession) -> int:
        result = await provision_user(session, account)
        logger.info("✅ Test user %s: %s (role=%s)", result.outcome, result.email, result.role)
        return 0

    return run_db_script(_action)


if __name__ == "__main__":
    sys.exit(main())
