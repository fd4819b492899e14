"""
profrate.auth.models

Outward-facing identity types.

Responsibilities:
- `CamelModel`: base for wire schemas (camelCase aliases, snake_case attributes).
- `Identity`: the user as seen by callers and guards (never carries the password hash).
- `AuthResult`: what signup/login hand back.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Identity(CamelModel):
    """
    Authenticated caller identity, built from a `User` row.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    id: uuid.UUID
    email: str
    full_name: str
    is_active: bool
    roles: list[str]
    created_at: datetime
    updated_at: datetime

    def has_any_role(self, roles: frozenset[str]) -> bool:
        return not roles.isdisjoint(self.roles)


@dataclass(frozen=True, slots=True)
class AuthResult:
    user: Identity
    token: str
