"""
profrate.auth

Authentication/authorization package.

Responsibilities:
- Password hashing and JWT session assertions.
- Signup/login/session resolution (AuthService).
- FastAPI guard dependencies: authenticate, then authorize by role.
"""
