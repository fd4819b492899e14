"""
profrate.db.models

Persistence schema for identities.

Responsibilities:
- Define the `User` ORM model (credential record) with normalized, unique email.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, String, Text, Uuid as SAUuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, validates

from profrate.auth.roles import BASELINE_ROLE


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.utcnow()


def _default_roles() -> list[str]:
    return [BASELINE_ROLE.value]


def normalize_email(email: str) -> str:
    return email.strip().lower()


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    # bcrypt hash; outward schemas never declare this column.
    password: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    roles: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=_default_roles)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    @validates("email")
    def _normalize_email(self, _key: str, value: str) -> str:
        return normalize_email(value)


# --- Module Notes -----------------------------------------------------------
# Email uniqueness is enforced by the table constraint; concurrent signups with the
# same normalized email are serialized there, not by an in-process lock.
