"""
profrate.auth.roles

Closed set of role tags an identity may hold.
"""

from __future__ import annotations

import enum


class ValidRoles(enum.StrEnum):
    admin = "admin"
    student = "student"
    # Legacy non-privileged tag kept for existing accounts.
    teacher = "teacher"


BASELINE_ROLE = ValidRoles.student


# --- Module Notes -----------------------------------------------------------
# Role values are stored in the users.roles JSON column; treat them as a stable contract.
