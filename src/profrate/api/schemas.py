"""
profrate.api.schemas

Shared request field types. Validation here runs before any auth-core code.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, EmailStr, Field, StringConstraints, field_validator

from profrate.auth.models import CamelModel
from profrate.auth.passwords import MAX_PASSWORD_BYTES


def _fits_bcrypt(value: str) -> str:
    # Longer input would be silently truncated by the hasher.
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


FullName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=512)]
Password = Annotated[str, Field(min_length=6), AfterValidator(_fits_bcrypt)]


class EmailBody(CamelModel):
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value
