"""
profrate.auth.passwords

bcrypt password hashing.

`verify_password` never raises on a mismatch or an unreadable stored hash; it
returns False. Minimum-length rules belong to request validation, not here.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only reads the first 72 bytes; newer releases refuse longer input instead.
MAX_PASSWORD_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(plaintext: str, *, rounds: int = DEFAULT_ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(plaintext), salt).decode("utf-8")


def verify_password(plaintext: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(plaintext), hashed.encode("utf-8"))
    except ValueError:
        return False
