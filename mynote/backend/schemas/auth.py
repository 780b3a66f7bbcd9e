"""
Auth Schemas.

Admin login and session verification payloads.
"""

from pydantic import Field

from mynote.backend.schemas.base import CamelModel


class LoginRequest(CamelModel):
    username: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=1, max_length=200)


class AdminUser(CamelModel):
    username: str
    is_admin: bool = True


class LoginResponse(CamelModel):
    success: bool = True
    token: str
    user: AdminUser


class SessionResponse(CamelModel):
    is_admin: bool
