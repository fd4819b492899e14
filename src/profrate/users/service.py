"""
profrate.users.service

User lifecycle service (transaction + persistence owner).

Responsibilities:
- Create users (signup baseline role, or explicit roles for administrators).
- Look up, update (re-hashing rotated passwords) and remove users.
- Translate storage failures into DuplicateCredential / PersistenceError.
- Create the bootstrap administrator on startup.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any, NoReturn

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from profrate.auth.errors import DuplicateCredential, PersistenceError, UserNotFound
from profrate.auth.models import Identity
from profrate.auth.passwords import hash_password
from profrate.auth.roles import BASELINE_ROLE, ValidRoles
from profrate.db.models import User, normalize_email
from profrate.db.repositories.users import UserRepo
from profrate.observability.logging import get_logger
from profrate.settings import Settings

log = get_logger(__name__)

_UNIQUE_VIOLATION = "23505"


class UsersService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)

    async def create(self, *, email: str, password: str, full_name: str) -> User:
        return await self.create_user(
            email=email, password=password, full_name=full_name, roles=[BASELINE_ROLE]
        )

    async def create_user(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        roles: Iterable[ValidRoles | str] | None = None,
    ) -> User:
        hashed = await self._hash(password)
        role_values = _role_values(roles) or [BASELINE_ROLE.value]
        try:
            user = await self._users.create(
                email=email,
                full_name=full_name.strip(),
                password=hashed,
                roles=role_values,
                is_active=True,
            )
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._handle_exceptions(e, email=email)
        log.info("user_created", user_id=str(user.id), roles=role_values)
        return user

    async def find_all(self) -> list[User]:
        with storage_reads():
            return await self._users.list_all()

    async def find_one_by_id(self, user_id: uuid.UUID) -> User:
        with storage_reads():
            user = await self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFound(f"User {user_id} not found")
        return user

    async def update(self, user_id: uuid.UUID, changes: dict[str, Any]) -> User:
        user = await self.find_one_by_id(user_id)

        if changes.get("password"):
            user.password = await self._hash(changes["password"])
        if changes.get("email") is not None:
            user.email = changes["email"]
        if changes.get("full_name") is not None:
            user.full_name = changes["full_name"].strip()
        if changes.get("is_active") is not None:
            user.is_active = bool(changes["is_active"])
        if changes.get("roles") is not None:
            user.roles = _role_values(changes["roles"]) or [BASELINE_ROLE.value]

        email = user.email
        try:
            await self._users.save(user)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._handle_exceptions(e, email=email)
        return user

    async def remove(self, user_id: uuid.UUID) -> Identity:
        user = await self.find_one_by_id(user_id)
        removed = Identity.model_validate(user)
        try:
            await self._users.delete(user)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._handle_exceptions(e, email=removed.email)
        log.info("user_removed", user_id=str(user_id))
        return removed

    async def ensure_default_admin(self) -> None:
        """
        Idempotent startup step: create the bootstrap administrator if absent.

        Failures are logged and swallowed so a broken bootstrap never stops the API.
        """

        admin_email = normalize_email(self._settings.admin_email)
        try:
            existing = await self._users.find_by_email(admin_email)
            if existing is not None:
                log.info("default_admin_exists", email=admin_email)
                return
            await self._users.create(
                email=admin_email,
                full_name=self._settings.admin_full_name,
                password=await self._hash(self._settings.admin_password),
                roles=[ValidRoles.admin.value],
                is_active=True,
            )
            await self._session.commit()
            log.info("default_admin_created", email=admin_email)
        except Exception:
            await self._session.rollback()
            log.exception("default_admin_failed", email=admin_email)

    async def _hash(self, password: str) -> str:
        # bcrypt is CPU bound; keep it off the event loop.
        return await asyncio.to_thread(
            hash_password, password, rounds=self._settings.bcrypt_rounds
        )

    def _handle_exceptions(self, error: SQLAlchemyError, *, email: str) -> NoReturn:
        if isinstance(error, IntegrityError) and _is_unique_violation(error):
            raise DuplicateCredential(_conflict_message(error, email)) from error
        log.error("persistence_failed", error=repr(error))
        raise PersistenceError() from error


@contextmanager
def storage_reads() -> Iterator[None]:
    """Turn a failed lookup into PersistenceError; the detail stays in the log."""
    try:
        yield
    except SQLAlchemyError as e:
        log.error("persistence_failed", error=repr(e))
        raise PersistenceError() from e


def _role_values(roles: Iterable[ValidRoles | str] | None) -> list[str]:
    if roles is None:
        return []
    return [ValidRoles(r).value for r in dict.fromkeys(roles)]


def _is_unique_violation(error: IntegrityError) -> bool:
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == _UNIQUE_VIOLATION
    # sqlite reports "UNIQUE constraint failed: users.email"
    return "unique" in str(orig).lower()


def _conflict_message(error: IntegrityError, email: str) -> str:
    # Postgres drivers expose e.g. 'Key (email)=(a@b.com) already exists.'
    for candidate in (error.orig, getattr(error.orig, "__cause__", None)):
        detail = getattr(candidate, "detail", None)
        if isinstance(detail, str) and detail:
            return detail.replace("Key ", "", 1).strip()
    return f"(email)=({normalize_email(email)}) already exists."


# --- Module Notes -----------------------------------------------------------
# Only this service turns SQLAlchemy errors into the auth error taxonomy; callers
# above it never see storage exceptions.
