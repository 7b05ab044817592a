"""
Auth endpoints — login (OAuth2 password flow), token refresh, sign-up
and admin user management (approval lifecycle, roles).
"""

import logging
from datetime import datetime, timezone

from fastapi import (APIRouter, Cookie, Depends, HTTPException, Request,
                     Response, status)
from fastapi.security import OAuth2PasswordRequestForm
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from esgenius.api.deps import get_current_active_user, get_db, require_admin
from esgenius.core.config import settings
from esgenius.core.security import (create_access_token, create_refresh_token,
                                    decode_refresh_token, get_password_hash,
                                    verify_password)
from esgenius.models.user import User
from esgenius.schemas.auth import (LogoutResponse, RefreshRequest,
                                   RegisterResponse, Token)
from esgenius.schemas.user import (ProfileUpdate, UserCreate, UserRead,
                                   UserRegister, UserUpdate)

# Rate limiter keyed by client IP
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


def _issue_tokens(response: Response, user: User) -> Token:
    access_token = create_access_token(user.id)
    refresh_token = create_refresh_token(user.id)
    _set_auth_cookies(response, access_token, refresh_token)
    return Token(access_token=access_token, refresh_token=refresh_token)


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/login", response_model=Token)
@limiter.limit("5/minute")
async def login_for_access_token(
    request: Request,
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Authenticate with email/password. Returns tokens and sets HttpOnly cookies."""
    result = await db.execute(
        select(User).where(User.email == form_data.username.lower().strip())
    )
    user = result.scalar_one_or_none()

    if user is None or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if user.status != "approved":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User account is {user.status}",
        )

    logger.info("Login: %s", user.email)
    return _issue_tokens(response, user)


@router.post("/refresh", response_model=Token)
@limiter.limit("10/minute")
async def refresh_access_token_endpoint(
    request: Request,
    response: Response,
    body: RefreshRequest | None = None,
    refresh_token_cookie: str | None = Cookie(None, alias="refresh_token"),
    db: AsyncSession = Depends(get_db),
) -> Token:
    # Priority: Body > Cookie
    token_str = body.refresh_token if body and body.refresh_token else refresh_token_cookie
    if not token_str:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token missing",
        )

    payload = decode_refresh_token(token_str)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    user = await db.get(User, int(payload["sub"]))
    if user is None or user.status != "approved":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or not approved",
        )
    return _issue_tokens(response, user)


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    """Clear auth cookies and end the session."""
    response.delete_cookie("access_token")
    response.delete_cookie("refresh_token")
    return LogoutResponse(message="Logged out")


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limiter.limit("10/minute")
async def register(
    request: Request,
    body: UserRegister,
    db: AsyncSession = Depends(get_db),
) -> RegisterResponse:
    """Self-service sign-up. The account waits for admin approval."""
    existing = await db.execute(select(User).where(User.email == body.email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=body.email,
        password_hash=get_password_hash(body.password),
        full_name=body.full_name,
        role="user",
        status="pending",
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registration pending approval: %s", user.email)
    return RegisterResponse(
        message="Registration received, awaiting approval",
        user=UserRead.model_validate(user),
    )


# ── Profile ─────────────────────────────────────────────────────────
@router.get("/me", response_model=UserRead)
async def read_current_user(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Return profile of the currently authenticated user."""
    return current_user


@router.patch("/me", response_model=UserRead)
async def update_current_user(
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> User:
    user = await _get_user_or_404(db, current_user.id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return user


# ── User management (admin-only) ───────────────────────────────────
@router.get("/users", response_model=list[UserRead])
async def list_users(
    status_filter: str | None = None,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> list[User]:
    query = select(User).order_by(User.id)
    if status_filter:
        query = query.where(User.status == status_filter)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("/users", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> User:
    """Create a pre-approved user account (admin only)."""
    existing = await db.execute(select(User).where(User.email == body.email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=body.email,
        password_hash=get_password_hash(body.password),
        full_name=body.full_name,
        role=body.role,
        status="approved",
        approved_at=datetime.now(timezone.utc),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User created by admin: %s (role=%s)", user.email, user.role)
    return user


@router.patch("/users/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> User:
    """Change role, status, name or password of a user."""
    user = await _get_user_or_404(db, user_id)
    changes = body.model_dump(exclude_unset=True)
    password = changes.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)
    for field, value in changes.items():
        setattr(user, field, value)
    if changes.get("status") == "approved" and user.approved_at is None:
        user.approved_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)
    logger.info("User %s updated: %s", user.email, sorted(body.model_dump(exclude_unset=True)))
    return user


async def _set_status(db: AsyncSession, user_id: int, new_status: str) -> User:
    user = await _get_user_or_404(db, user_id)
    user.status = new_status
    if new_status == "approved":
        user.approved_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)
    logger.info("User %s %s", user.email, new_status)
    return user


@router.post("/users/{user_id}/approve", response_model=UserRead)
async def approve_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> User:
    return await _set_status(db, user_id, "approved")


@router.post("/users/{user_id}/reject", response_model=UserRead)
async def reject_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> User:
    return await _set_status(db, user_id, "rejected")
