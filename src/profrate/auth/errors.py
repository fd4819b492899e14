"""
profrate.auth.errors

Error taxonomy for the auth core.

Every error carries a stable `kind`, an HTTP status and a caller-safe `message`.
Internal detail (storage errors, denied role sets) goes to the server log only.
"""

from __future__ import annotations

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class AuthError(Exception):
    kind: str = "AuthError"
    status_code: int = HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind, "message": self.message}


class DuplicateCredential(AuthError):
    kind = "DuplicateCredential"
    default_message = "Email already registered"


class InvalidCredentials(AuthError):
    kind = "InvalidCredentials"
    status_code = HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class AccountInactive(AuthError):
    kind = "AccountInactive"
    status_code = HTTP_401_UNAUTHORIZED
    default_message = "User is inactive, talk with an admin"


class InvalidToken(AuthError):
    kind = "InvalidToken"
    status_code = HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class UnknownSubject(InvalidToken):
    # Same kind and message as InvalidToken: a deleted user and a forged token look alike.
    pass


class MissingIdentity(AuthError):
    kind = "MissingIdentity"
    default_message = "User not found in request"


class InsufficientRole(AuthError):
    kind = "InsufficientRole"
    status_code = HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class UserNotFound(AuthError):
    kind = "UserNotFound"
    status_code = HTTP_404_NOT_FOUND
    default_message = "User not found"


class PersistenceError(AuthError):
    kind = "PersistenceError"
    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Please check server logs"
