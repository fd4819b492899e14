"""
profrate.api.routers.users

Administrative user management.

Responsibilities:
- Create/list/get/update/remove users (role=admin).
- `GET /v1/users/me` for any authenticated identity.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from profrate.api.deps import db_session, settings_dep
from profrate.api.schemas import EmailBody, FullName, Password
from profrate.auth.deps import auth
from profrate.auth.models import CamelModel, Identity
from profrate.auth.roles import ValidRoles
from profrate.settings import Settings
from profrate.users.service import UsersService

router = APIRouter(prefix="/v1/users", tags=["users"])


class CreateUserRequest(EmailBody):
    password: Password
    full_name: FullName
    roles: list[ValidRoles] | None = None


class UpdateUserRequest(CamelModel):
    email: EmailStr | None = None
    password: Password | None = None
    full_name: FullName | None = None
    is_active: bool | None = None
    roles: list[ValidRoles] | None = None


def _service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> UsersService:
    return UsersService(session=session, settings=settings)


@router.post(
    "",
    response_model=Identity,
    status_code=HTTP_201_CREATED,
    dependencies=[auth(ValidRoles.admin)],
)
async def create_user(
    body: CreateUserRequest,
    svc: UsersService = Depends(_service),
) -> Identity:
    user = await svc.create_user(
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        roles=body.roles,
    )
    return Identity.model_validate(user)


@router.get("", response_model=list[Identity], dependencies=[auth(ValidRoles.admin)])
async def list_users(svc: UsersService = Depends(_service)) -> list[Identity]:
    return [Identity.model_validate(u) for u in await svc.find_all()]


@router.get("/me", response_model=Identity)
async def me(user: Identity = auth()) -> Identity:
    return user


@router.get("/{user_id}", response_model=Identity, dependencies=[auth(ValidRoles.admin)])
async def get_user(user_id: uuid.UUID, svc: UsersService = Depends(_service)) -> Identity:
    return Identity.model_validate(await svc.find_one_by_id(user_id))


@router.patch("/{user_id}", response_model=Identity, dependencies=[auth(ValidRoles.admin)])
async def update_user(
    user_id: uuid.UUID,
    body: UpdateUserRequest,
    svc: UsersService = Depends(_service),
) -> Identity:
    user = await svc.update(user_id, body.model_dump(exclude_unset=True))
    return Identity.model_validate(user)


@router.delete("/{user_id}", response_model=Identity, dependencies=[auth(ValidRoles.admin)])
async def remove_user(user_id: uuid.UUID, svc: UsersService = Depends(_service)) -> Identity:
    return await svc.remove(user_id)
