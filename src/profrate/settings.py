"""
profrate.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Require the JWT signing secret at startup and hide it from repr/logging.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from profrate.auth.passwords import DEFAULT_ROUNDS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PROFRATE_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "profrate-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 9090

    # Auth. No default secret: a missing PROFRATE_JWT_SECRET fails settings validation.
    jwt_alg: str = "HS256"
    jwt_issuer: str = "profrate-api"
    jwt_audience: str = "profrate-clients"
    jwt_secret: str = Field(min_length=1, repr=False)
    jwt_ttl_minutes: int = Field(default=4 * 60, ge=1)
    bcrypt_rounds: int = Field(default=DEFAULT_ROUNDS, ge=4, le=31)

    # Bootstrap administrator, created on startup when absent.
    admin_email: str = "admin@example.com"
    admin_password: str = Field(default="admin123", repr=False)
    admin_full_name: str = "System Administrator"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./profrate.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


# --- Module Notes -----------------------------------------------------------
# Rotating jwt_secret invalidates every outstanding token; there is no revocation list.
