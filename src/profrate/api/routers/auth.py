"""
profrate.api.routers.auth

Credential issuance and the current-identity endpoint.

Responsibilities:
- `POST /v1/auth/signup` and `POST /v1/auth/login` (no guards: they establish identity).
- `GET /v1/auth/me` (any authenticated identity).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from profrate.api.deps import db_session, settings_dep
from profrate.api.schemas import EmailBody, FullName, Password
from profrate.auth.deps import auth
from profrate.auth.models import AuthResult, CamelModel, Identity
from profrate.auth.service import AuthService
from profrate.settings import Settings

router = APIRouter(prefix="/v1/auth", tags=["auth"])


class SignupRequest(EmailBody):
    password: Password
    full_name: FullName


class LoginRequest(EmailBody):
    password: Password


class AuthResponse(CamelModel):
    token: str
    user: Identity

    @classmethod
    def from_result(cls, result: AuthResult) -> AuthResponse:
        return cls(token=result.token, user=result.user)


@router.post("/signup", response_model=AuthResponse, status_code=HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuthResponse:
    svc = AuthService(session=session, settings=settings)
    result = await svc.signup(email=body.email, password=body.password, full_name=body.full_name)
    return AuthResponse.from_result(result)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuthResponse:
    svc = AuthService(session=session, settings=settings)
    result = await svc.login(email=body.email, password=body.password)
    return AuthResponse.from_result(result)


@router.get("/me", response_model=Identity)
async def me(user: Identity = auth()) -> Identity:
    return user
