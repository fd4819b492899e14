"""
profrate.auth.service

Authentication service.

Responsibilities:
- signup: persist a new identity (baseline role) and issue a token.
- login: verify credentials and issue a token.
- validate_session: resolve a token subject to an active identity.
"""

from __future__ import annotations

import asyncio
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from profrate.auth.errors import AccountInactive, InvalidCredentials, UnknownSubject
from profrate.auth.jwt import JwtConfig, issue_token
from profrate.auth.models import AuthResult, Identity
from profrate.auth.passwords import verify_password
from profrate.db.models import User
from profrate.db.repositories.users import UserRepo
from profrate.observability.logging import get_logger
from profrate.settings import Settings
from profrate.users.service import UsersService, storage_reads

log = get_logger(__name__)


class AuthService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._users = UsersService(session=session, settings=settings)
        self._repo = UserRepo(session)
        self._jwt = JwtConfig.from_settings(settings)

    async def signup(self, *, email: str, password: str, full_name: str) -> AuthResult:
        # Token is issued only once the user row is committed.
        user = await self._users.create(email=email, password=password, full_name=full_name)
        log.info("signup", user_id=str(user.id))
        return self._result(user)

    async def login(self, *, email: str, password: str) -> AuthResult:
        with storage_reads():
            user = await self._repo.find_by_email(email)
        if user is None:
            log.info("login_failed", reason="unknown_email")
            raise InvalidCredentials()

        if not await asyncio.to_thread(verify_password, password, user.password):
            log.info("login_failed", reason="bad_password", user_id=str(user.id))
            raise InvalidCredentials()

        # The active flag is enforced by validate_session on every guarded call, not here.
        log.info("login", user_id=str(user.id))
        return self._result(user)

    async def validate_session(self, user_id: uuid.UUID | str) -> Identity:
        try:
            key = user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(user_id)
        except ValueError as e:
            raise UnknownSubject() from e

        with storage_reads():
            user = await self._repo.find_by_id(key)
        if user is None:
            raise UnknownSubject()
        if not user.is_active:
            raise AccountInactive()
        return Identity.model_validate(user)

    def _result(self, user: User) -> AuthResult:
        token = issue_token(cfg=self._jwt, subject_id=str(user.id), email=user.email)
        return AuthResult(user=Identity.model_validate(user), token=token)
