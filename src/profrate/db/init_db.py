"""
profrate.db.init_db

Create tables for local development and tests. Production uses Alembic.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from profrate.db.models import Base


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
