"""Schemas for registration, login and user reads.

Learn: Request fields default to "" instead of being required so that
missing values reach validate_registration and come back as a 400 with
the offending field named, same as any other bad value.
"""

import uuid
from datetime import datetime

from tasktrack.schemas import CamelModel


class RegisterRequest(CamelModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(CamelModel):
    email: str = ""
    password: str = ""


class TokenResponse(CamelModel):
    token: str
    token_type: str = "bearer"


class UserRead(CamelModel):
    """Public view of a user: no password hash, ever."""
    id: uuid.UUID
    name: str
    email: str
    role: str
    created_at: datetime
