# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for admin authentication data.
# =============================================================================

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Authenticated admin extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the auth service.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str | None = None
    role: str | None = None


class LoginRequest(BaseModel):
    """
    Email/password sign-in.

    Example:
        {"email": "admin@example.com", "password": "..."}
    """

    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Tokens returned after a successful sign-in."""

    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None
    token_type: str = "bearer"
    user: AuthUser


class SessionStatus(BaseModel):
    """
    Whether the caller has a valid admin session.

    The admin panel renders its login form when authenticated is false.
    """

    authenticated: bool
    user: AuthUser | None = None
