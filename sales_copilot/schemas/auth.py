"""Authentication schemas for Supabase JWT tokens and team context."""

from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class JWTClaims(BaseModel):
    """JWT claims extracted from a Supabase access token."""

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[EmailStr] = Field(None, description="User email")
    role: str = Field(default="authenticated", description="User role")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    iss: str = Field(..., description="Token issuer")

    aud: Optional[str] = Field(None, description="Audience")
    app_metadata: Optional[Dict[str, Any]] = Field(None, description="Application metadata")
    user_metadata: Optional[Dict[str, Any]] = Field(None, description="User metadata")
    session_id: Optional[str] = Field(None, description="Auth session ID")


class CurrentUser(BaseModel):
    """Current authenticated user information."""

    id: str = Field(..., description="Supabase user ID")
    email: Optional[EmailStr] = Field(None, description="User email")
    role: str = Field(default="user", description="User role")


class TeamContext(BaseModel):
    """Caller identity together with the team it acts for."""

    user_id: str = Field(..., description="Supabase user ID")
    team_id: UUID = Field(..., description="Team the user belongs to")
    role: str = Field(default="member", description="Role within the team")


__all__ = ["JWTClaims", "CurrentUser", "TeamContext"]
