"""Request and response models for sales sessions."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SessionCreateRequest(BaseModel):
    """Payload for creating a session."""

    company_name: Optional[str] = Field(None, description="Optional display label for the customer")


class SessionUpdateRequest(BaseModel):
    """Payload for updating a session.

    ``status`` is a plain string so that values outside the enumeration reach
    the state machine and are rejected with a typed error instead of a 422.
    """

    status: Optional[str] = Field(None, description="active | demo_booked | won | lost")
    company_name: Optional[str] = Field(None, description="New display label; blank clears it")


class SessionResponse(BaseModel):
    """Sales session as returned by the API."""

    id: UUID
    team_id: UUID
    created_by: str
    company_name: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionEnvelope(BaseModel):
    """Single-session response body."""

    session: SessionResponse


class SessionListResponse(BaseModel):
    """Session listing response body."""

    sessions: List[SessionResponse] = Field(default_factory=list)
