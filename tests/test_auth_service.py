"""
tests.test_auth_service

AuthService against a real SQLite-backed session.
"""

from __future__ import annotations

import asyncio
import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from profrate.auth.errors import (
    AccountInactive,
    DuplicateCredential,
    InvalidCredentials,
    InvalidToken,
    PersistenceError,
    UnknownSubject,
)
from profrate.auth.jwt import JwtConfig, decode_and_validate
from profrate.auth.service import AuthService
from profrate.db.repositories.users import UserRepo
from profrate.settings import Settings
from profrate.users.service import UsersService


@pytest.mark.asyncio
async def test_signup_normalizes_and_issues_token(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    async with session_factory() as session:
        result = await AuthService(session=session, settings=settings).signup(
            email="New@Example.com", password="password123", full_name="New User"
        )

    assert result.user.email == "new@example.com"
    assert result.user.roles == ["student"]
    assert result.user.is_active is True
    assert "password" not in result.user.model_dump()

    claims = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=result.token)
    assert claims.subject_id == str(result.user.id)
    assert claims.email == "new@example.com"


@pytest.mark.asyncio
async def test_signup_stores_hash_not_plaintext(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    async with session_factory() as session:
        await AuthService(session=session, settings=settings).signup(
            email="a@b.com", password="password123", full_name="A"
        )
        user = await UserRepo(session).find_by_email("a@b.com")

    assert user is not None
    assert user.password != "password123"
    assert user.password.startswith("$2b$")


@pytest.mark.asyncio
async def test_duplicate_signup_differing_in_case_and_whitespace(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    async with session_factory() as session:
        svc = AuthService(session=session, settings=settings)
        await svc.signup(email="a@b.com", password="password123", full_name="A")
        with pytest.raises(DuplicateCredential) as exc:
            await svc.signup(email=" A@B.COM ", password="other-password", full_name="B")

    assert "a@b.com" in exc.value.message
    assert "other-password" not in exc.value.message
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_concurrent_duplicate_signups_only_one_wins(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    async def attempt() -> str:
        async with session_factory() as session:
            try:
                await AuthService(session=session, settings=settings).signup(
                    email="race@example.com", password="password123", full_name="Racer"
                )
            except DuplicateCredential:
                return "duplicate"
            return "ok"

    outcomes = await asyncio.gather(attempt(), attempt())
    assert sorted(outcomes) == ["duplicate", "ok"]


@pytest.mark.asyncio
async def test_other_storage_failures_are_opaque(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def boom(self: UserRepo, **fields: object) -> None:
        raise OperationalError("INSERT INTO users", {}, Exception("disk I/O error"))

    monkeypatch.setattr(UserRepo, "create", boom)
    async with session_factory() as session:
        with pytest.raises(PersistenceError) as exc:
            await AuthService(session=session, settings=settings).signup(
                email="a@b.com", password="password123", full_name="A"
            )

    assert exc.value.message == "Please check server logs"
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_login_success(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    async with session_factory() as session:
        svc = AuthService(session=session, settings=settings)
        created = await svc.signup(email="u@x.com", password="password123", full_name="U")
        result = await svc.login(email=" U@X.com", password="password123")

    assert result.user.id == created.user.id
    assert result.token


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    async with session_factory() as session:
        svc = AuthService(session=session, settings=settings)
        await svc.signup(email="realuser@x.com", password="password123", full_name="Real")

        with pytest.raises(InvalidCredentials) as missing:
            await svc.login(email="nouser@x.com", password="anything")
        with pytest.raises(InvalidCredentials) as wrong:
            await svc.login(email="realuser@x.com", password="wrongpassword")

    assert type(missing.value) is type(wrong.value)
    assert missing.value.to_dict() == wrong.value.to_dict()


@pytest.mark.asyncio
async def test_login_does_not_check_active_flag(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    async with session_factory() as session:
        svc = AuthService(session=session, settings=settings)
        created = await svc.signup(email="off@x.com", password="password123", full_name="Off")
        await UsersService(session=session, settings=settings).update(
            created.user.id, {"is_active": False}
        )

        result = await svc.login(email="off@x.com", password="password123")
        assert result.token
        with pytest.raises(AccountInactive):
            await svc.validate_session(result.user.id)


@pytest.mark.asyncio
async def test_validate_session_returns_identity_without_password(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    async with session_factory() as session:
        svc = AuthService(session=session, settings=settings)
        created = await svc.signup(email="v@x.com", password="password123", full_name="V")
        identity = await svc.validate_session(str(created.user.id))

    assert identity.id == created.user.id
    assert identity.email == "v@x.com"
    assert not hasattr(identity, "password")


@pytest.mark.asyncio
@pytest.mark.parametrize("subject", [uuid.uuid4(), "not-a-uuid"])
async def test_validate_session_unknown_subject(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings, subject: object
) -> None:
    async with session_factory() as session:
        with pytest.raises(UnknownSubject) as exc:
            await AuthService(session=session, settings=settings).validate_session(subject)

    # Surfaced exactly like a bad token.
    assert isinstance(exc.value, InvalidToken)
    assert exc.value.to_dict() == InvalidToken().to_dict()


async def _failing_lookup(*args: object, **kwargs: object) -> None:
    raise OperationalError("SELECT users", {}, Exception("connection lost"))


@pytest.mark.asyncio
async def test_login_storage_failure_is_opaque(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(UserRepo, "find_by_email", _failing_lookup)
    async with session_factory() as session:
        with pytest.raises(PersistenceError) as exc:
            await AuthService(session=session, settings=settings).login(
                email="u@x.com", password="password123"
            )

    assert exc.value.to_dict() == {"error": "PersistenceError", "message": "Please check server logs"}


@pytest.mark.asyncio
async def test_validate_session_storage_failure_is_opaque(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(UserRepo, "find_by_id", _failing_lookup)
    async with session_factory() as session:
        with pytest.raises(PersistenceError):
            await AuthService(session=session, settings=settings).validate_session(uuid.uuid4())
        with pytest.raises(PersistenceError):
            await UsersService(session=session, settings=settings).find_one_by_id(uuid.uuid4())
