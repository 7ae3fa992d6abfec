"""Request and response models for teams and playbooks."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SalesMotion(str, Enum):
    """Sales motion the prompt is tuned for."""

    SMB = "smb"
    ENTERPRISE = "enterprise"


class TeamCreateRequest(BaseModel):
    """Payload for creating a team owned by the caller."""

    name: str = Field(..., description="Team display name")
    sales_motion: Optional[SalesMotion] = Field(None, description="smb | enterprise")
    tone_default: Optional[str] = Field(None, description="Default tone of voice")
    no_go_phrases: Optional[str] = Field(None, description="Phrases the script must avoid")
    primary_objections: Optional[str] = Field(None, description="Objections the team hears most")


class Playbook(BaseModel):
    """Team-level defaults folded into the generation prompt."""

    sales_motion: Optional[str] = None
    tone_default: Optional[str] = None
    no_go_phrases: Optional[str] = None
    primary_objections: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TeamResponse(BaseModel):
    id: UUID
    name: str
    owner_id: str
    sales_motion: Optional[str] = None
    tone_default: Optional[str] = None
    no_go_phrases: Optional[str] = None
    primary_objections: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TeamEnvelope(BaseModel):
    team: TeamResponse


class PlaybookEnvelope(BaseModel):
    playbook: Playbook
