"""
profrate.db.repositories.users

Credential store for `User` records.

Responsibilities:
- Point lookups by id and by normalized email (misses return None).
- Create, save, list and delete user records.

Commit/rollback is owned by the calling service.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from profrate.db.models import User, normalize_email


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self._session.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == normalize_email(email))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(self, **fields: Any) -> User:
        user = User(**fields)
        self._session.add(user)
        await self._session.flush()
        return user

    async def save(self, user: User) -> User:
        self._session.add(user)
        await self._session.flush()
        return user

    async def list_all(self) -> list[User]:
        stmt = select(User).order_by(User.created_at)
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, user: User) -> None:
        await self._session.delete(user)
        await self._session.flush()
