"""Request and response models for script generation and history."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Payload for the generation endpoint.

    ``input`` is validated by the orchestrator, not here, so that a blank
    value yields the typed "Missing input" error.
    """

    input: Optional[str] = Field(None, description="Free-text description of the sales situation")
    session_id: Optional[UUID] = Field(None, description="Session to attach the script to")


class GenerateResponse(BaseModel):
    """Generated script: raw text plus its parsed sections."""

    ok: bool = True
    raw_output: str = Field(..., description="Unparsed model response")
    summary: str = ""
    opening: str = ""
    qualifying: str = Field("", description="Qualifying questions section")
    value_framing: str = ""
    objections: str = ""
    closing: str = ""
    coach_tips: str = ""
    session_id: Optional[UUID] = None
    script_id: Optional[UUID] = Field(None, description="Stored script id; null if storage failed")


class ScriptHistoryItem(BaseModel):
    """History row: a script joined with its session's display fields."""

    id: UUID
    created_at: datetime
    input: str
    raw_output: str
    session_id: Optional[UUID] = None
    company_name: Optional[str] = None
    status: Optional[str] = None


class ScriptHistoryResponse(BaseModel):
    scripts: List[ScriptHistoryItem] = Field(default_factory=list)


class ScriptDetail(BaseModel):
    """Full stored script."""

    id: UUID
    created_at: datetime
    session_id: Optional[UUID] = None
    input: str
    raw_output: str
    summary: str = ""
    opening: str = ""
    qualifying_questions: str = ""
    value_framing: str = ""
    objections: str = ""
    closing: str = ""
    coach_tips: str = ""

    model_config = ConfigDict(from_attributes=True)


class LatestScriptResponse(BaseModel):
    script: Optional[ScriptDetail] = None
