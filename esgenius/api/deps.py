"""
FastAPI dependencies — auth guards, role permissions and database session.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.core.config import settings
from esgenius.core.security import decode_access_token
from esgenius.db.session import async_session_factory
from esgenius.models.user import User

# We use auto_error=False so we can manually check for the cookie if header is missing
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)

ADMIN_ROLES = {"admin", "super_admin"}

READ_DATA = "read_data"
CREATE_DATA = "create_data"
UPDATE_DATA = "update_data"
DELETE_DATA = "delete_data"
APPROVE_DATA = "approve_data"
MANAGE_USERS = "manage_users"

ROLE_PERMISSIONS: dict[str, set[str]] = {
    "user": {READ_DATA},
    "data_entry": {READ_DATA, CREATE_DATA},
    "supervisor": {READ_DATA, CREATE_DATA, UPDATE_DATA, APPROVE_DATA},
    "admin": {READ_DATA, CREATE_DATA, UPDATE_DATA, DELETE_DATA, APPROVE_DATA, MANAGE_USERS},
    "super_admin": {READ_DATA, CREATE_DATA, UPDATE_DATA, DELETE_DATA, APPROVE_DATA, MANAGE_USERS},
}


def has_permission(role: str, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, set())


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),  # Read from HttpOnly Cookie
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode JWT from Header OR Cookie, look up user."""

    # Priority: Header > Cookie
    final_token = token
    if not final_token and access_token:
        # auth.py stores the cookie as "Bearer <token>"
        final_token = access_token.removeprefix("Bearer ")

    credentials_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not final_token:
        raise credentials_exc

    payload = decode_access_token(final_token)
    if payload is None:
        raise credentials_exc

    user_id: str | None = payload.get("sub")
    if user_id is None:
        raise credentials_exc

    user = await db.get(User, int(user_id))
    if user is None:
        raise credentials_exc
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Reject accounts that are still pending or were rejected."""
    if current_user.status != "approved":
        raise HTTPException(status_code=403, detail="User account is not approved")
    return current_user


async def require_admin(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Only allow admin and super_admin roles to proceed."""
    if current_user.role not in ADMIN_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


def require_permission(permission: str) -> Callable[..., Awaitable[User]]:
    """Build a dependency that checks the caller's role grants ``permission``."""

    async def _guard(current_user: User = Depends(get_current_active_user)) -> User:
        if not has_permission(current_user.role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission '{permission}' required",
            )
        return current_user

    return _guard
