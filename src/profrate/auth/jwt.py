"""
profrate.auth.jwt

JWT session assertions.

Responsibilities:
- Issue signed tokens carrying the identity id (`sub`) and email.
- Decode and validate tokens with strict claim requirements (iss/aud/exp/iat/sub/email).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from profrate.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str
    ttl: timedelta = timedelta(hours=4)

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
            ttl=timedelta(minutes=settings.jwt_ttl_minutes),
        )


@dataclass(frozen=True, slots=True)
class TokenClaims:
    subject_id: str
    email: str
    issued_at: int
    expires_at: int


class JwtValidationError(Exception):
    pass


def issue_token(*, cfg: JwtConfig, subject_id: str, email: str) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + cfg.ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> TokenClaims:
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={"require": ["exp", "iat", "iss", "aud", "sub", "email"]},
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e

    subject_id = payload.get("sub")
    email = payload.get("email")
    if not isinstance(subject_id, str) or not subject_id:
        raise JwtValidationError("invalid subject")
    if not isinstance(email, str) or not email:
        raise JwtValidationError("invalid email claim")
    return TokenClaims(
        subject_id=subject_id,
        email=email,
        issued_at=int(payload["iat"]),
        expires_at=int(payload["exp"]),
    )


# --- Module Notes -----------------------------------------------------------
# There is no server-side session store: a token is valid iff its signature and
# registered claims check out. Every guarded request still re-resolves the subject.
