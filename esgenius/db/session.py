"""
Async SQLAlchemy engine & session factory (aiosqlite driver by default).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)

from esgenius.core.config import settings
from esgenius.db.base import Base

engine_args: dict = {
    "echo": False,
    "pool_pre_ping": True,
}

if settings.DATABASE_URL.startswith("sqlite"):
    engine_args["connect_args"] = {"check_same_thread": False}
else:
    engine_args.update(
        {
            "pool_size": 20,
            "max_overflow": 10,
            "pool_recycle": 300,
        }
    )

engine = create_async_engine(
    settings.DATABASE_URL,
    **engine_args,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_models(bind: AsyncEngine | None = None) -> None:
    """Create every table registered on ``Base.metadata``."""
    # Ensure all models are imported so metadata.create_all can see them
    from esgenius.models.esg_data import EsgDataRecord  # noqa: F401
    from esgenius.models.taxonomy import CustomTaxonomy  # noqa: F401
    from esgenius.models.user import User  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
