"""Authentication-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class TokenPayload(BaseModel):
    """Decoded JWT payload structure."""
    sub: UUID  # user_id
    token_version: int


class UserSession(BaseModel):
    """
    Session context for authenticated requests.

    Returned by the get_current_session dependency.
    """
    user_id: UUID
    email: str
    username: str
    onboarding_completed: bool = False


class RegisterRequest(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: str
    password: str


class MeResponse(BaseModel):
    """Response schema for /auth/me, register and login."""
    user_id: UUID
    email: str
    username: str
    onboarding_completed: bool
    created_at: datetime | None = None
