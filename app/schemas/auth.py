"""Pydantic schemas for authentication."""

from pydantic import BaseModel


class TokenUser(BaseModel):
    """Lightweight user representation from JWT claims. No DB query needed.

    Role claims in the token are ignored; roles come from ``user_roles``.
    """

    id: str
    email: str = ""
    username: str = ""


class MeResponse(BaseModel):
    """The caller's profile and resolved roles."""

    id: str
    email: str
    full_name: str | None = None
    status: str
    profile_role: str | None = None
    roles: list[str]
    primary_role: str


class LogoutResponse(BaseModel):
    """Result of a logout call."""

    revoked: bool
