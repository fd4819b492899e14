"""
profrate.auth.deps

FastAPI guard dependencies.

Responsibilities:
- Stage 1 (`authenticate`): bearer token -> verified claims -> active `Identity`,
  attached to `request.state.user`.
- Stage 2 (`authorize` / `RoleGuard`): declared roles vs identity roles.
- `auth(*roles)`: the single declaration point that wires both stages, in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from profrate.api.deps import db_session, settings_dep
from profrate.auth.errors import InsufficientRole, InvalidToken, MissingIdentity
from profrate.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from profrate.auth.models import Identity
from profrate.auth.roles import ValidRoles
from profrate.auth.service import AuthService
from profrate.observability.logging import get_logger
from profrate.settings import Settings

log = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True)
class ProtectedOperation:
    """Roles allowed to invoke an operation. Empty means any authenticated identity."""

    required_roles: frozenset[str] = frozenset()


def current_user(request: Request) -> Identity | None:
    return getattr(request.state, "user", None)


async def authenticate(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Identity:
    if creds is None or not creds.credentials:
        raise InvalidToken()

    try:
        claims = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        log.info("token_rejected", reason=str(e))
        raise InvalidToken() from e

    # Raises UnknownSubject / AccountInactive, both rendered as 401.
    identity = await AuthService(session=session, settings=settings).validate_session(
        claims.subject_id
    )
    request.state.user = identity
    return identity


def authorize(operation: ProtectedOperation, identity: Identity | None) -> None:
    if not operation.required_roles:
        return
    if identity is None:
        raise MissingIdentity()
    if identity.has_any_role(operation.required_roles):
        return

    log.warning(
        "forbidden",
        email=identity.email,
        roles=identity.roles,
        required_roles=sorted(operation.required_roles),
    )
    raise InsufficientRole()


class RoleGuard:
    def __init__(self, operation: ProtectedOperation) -> None:
        self.operation = operation

    async def __call__(
        self,
        request: Request,
        _authenticated: Identity = Depends(authenticate),
    ) -> Identity | None:
        # Depending on `authenticate` guarantees stage 1 has run and attached the identity.
        identity = current_user(request)
        authorize(self.operation, identity)
        return identity


def auth(*roles: ValidRoles | str) -> Any:
    """
    Protect an operation: authenticate, then require at least one of `roles`.

    Use as a parameter default (`user: Identity = auth()`) to receive the identity,
    or in `dependencies=[auth(ValidRoles.admin)]`.
    """

    operation = ProtectedOperation(required_roles=frozenset(ValidRoles(r).value for r in roles))
    return Depends(RoleGuard(operation))


# --- Module Notes -----------------------------------------------------------
# The caller-facing 403 never lists the roles that would have been accepted; those
# only appear in the "forbidden" log event.
