"""
Account provisioning — create or refresh well-known, pre-approved users.

Every function here works against a caller-supplied ``AsyncSession`` and
returns result objects; deciding the process exit code is left to the
command-line wrappers in ``esgenius.scripts``. Passwords are hashed with bcrypt
and never logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.core.security import get_password_hash
from esgenius.models.user import User
from esgenius.schemas.user import VALID_ROLES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountSpec:
    email: str
    password: str
    full_name: str
    role: str = "user"

    def __repr__(self) -> str:
        return f"AccountSpec(email={self.email!r}, full_name={self.full_name!r}, role={self.role!r})"


@dataclass
class ProvisionResult:
    email: str
    role: str
    outcome: str  # created | updated | skipped | failed
    user_id: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome != "failed"


# Local development accounts. Passwords can be overridden from the CLI.
TEST_ACCOUNT = AccountSpec("user@gmail.com", "password123", "Test User", "admin")

DEFAULT_SEED_ACCOUNTS: tuple[AccountSpec, ...] = (
    AccountSpec("superadmin1@esgenius.com", "Admin@2025", "Super Admin 1", "super_admin"),
    AccountSpec("supervisor1@esgenius.com", "Super@2025", "Supervisor 1", "supervisor"),
    AccountSpec("dataentry1@esgenius.com", "Data@2025", "Data Entry User 1", "data_entry"),
)


async def _find_user(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def provision_user(session: AsyncSession, account: AccountSpec) -> ProvisionResult:
    """Ensure exactly one approved ``User`` row exists for ``account.email``.

    An existing row gets a fresh password hash, the requested role and
    ``status = approved`` in place; otherwise a new row is inserted.
    Persistence errors are rolled back and re-raised.
    """
    if account.role not in VALID_ROLES:
        raise ValueError(f"Role must be one of: {sorted(VALID_ROLES)}")
    email = account.email.strip().lower()
    now = datetime.now(timezone.utc)

    try:
        user = await _find_user(session, email)
        password_hash = get_password_hash(account.password)
        if user is None:
            user = User(
                email=email,
                password_hash=password_hash,
                full_name=account.full_name,
                role=account.role,
                status="approved",
                approved_at=now,
            )
            session.add(user)
            outcome = "created"
        else:
            user.password_hash = password_hash
            user.full_name = account.full_name
            user.role = account.role
            user.status = "approved"
            user.approved_at = user.approved_at or now
            outcome = "updated"
        await session.commit()
        await session.refresh(user)
    except Exception:
        await session.rollback()
        logger.exception("Provisioning failed for %s", email)
        raise

    logger.info("User %s: %s (role=%s, id=%s)", outcome, email, account.role, user.id)
    return ProvisionResult(email=email, role=account.role, outcome=outcome, user_id=user.id)


async def seed_users(
    session: AsyncSession,
    accounts: Iterable[AccountSpec] = DEFAULT_SEED_ACCOUNTS,
    skip_existing: bool = True,
) -> list[ProvisionResult]:
    """Provision a batch of accounts, reporting one outcome per account.

    A failure on one account is recorded and the batch carries on.
    """
    results: list[ProvisionResult] = []
    for account in accounts:
        email = account.email.strip().lower()
        try:
            existing = await _find_user(session, email)
            if existing is not None and skip_existing:
                logger.warning("User already exists: %s", email)
                results.append(
                    ProvisionResult(email, existing.role, "skipped", user_id=existing.id)
                )
                continue
            results.append(await provision_user(session, account))
        except Exception as exc:  # noqa: BLE001
            await session.rollback()
            logger.error("User %s could not be provisioned: %s", email, exc)
            results.append(ProvisionResult(email, account.role, "failed", error=str(exc)))

    created = sum(r.outcome == "created" for r in results)
    failed = sum(r.outcome == "failed" for r in results)
    logger.info("User seeding completed: %d created, %d failed, %d total", created, failed, len(results))
    return results


async def ensure_first_admin(session: AsyncSession, email: str, password: str) -> ProvisionResult:
    """Create the bootstrap admin on first run; leave an existing row untouched."""
    results = await seed_users(
        session,
        [AccountSpec(email, password, "System Administrator", "admin")],
        skip_existing=True,
    )
    return results[0]
