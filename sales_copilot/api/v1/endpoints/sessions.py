"""Sales session endpoints."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from sales_copilot.core.auth import get_team_context
from sales_copilot.dependencies import get_session_service
from sales_copilot.schemas.auth import TeamContext
from sales_copilot.schemas.sessions import (
    SessionCreateRequest,
    SessionEnvelope,
    SessionListResponse,
    SessionResponse,
    SessionUpdateRequest,
)
from sales_copilot.services.session_service import SessionService
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=SessionEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a session",
    operation_id="create_session",
)
async def create_session(
    request: SessionCreateRequest,
    context: Annotated[TeamContext, Depends(get_team_context)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> SessionEnvelope:
    """Open a new customer engagement in status active."""
    session = await session_service.create_session(
        context.team_id, context.user_id, company_name=request.company_name
    )
    return SessionEnvelope(session=SessionResponse.model_validate(session))


@router.get(
    "",
    response_model=SessionListResponse,
    summary="List sessions",
    description="List the team's sessions, newest first, optionally filtered by status",
    operation_id="list_sessions",
)
async def list_sessions(
    context: Annotated[TeamContext, Depends(get_team_context)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
    status_filter: Annotated[Optional[str], Query(alias="status")] = None,
) -> SessionListResponse:
    sessions = await session_service.list_sessions(context.team_id, status=status_filter)
    return SessionListResponse(
        sessions=[SessionResponse.model_validate(s) for s in sessions]
    )


@router.get(
    "/{session_id}",
    response_model=SessionEnvelope,
    summary="Get a session",
    operation_id="get_session",
)
async def get_session(
    session_id: UUID,
    context: Annotated[TeamContext, Depends(get_team_context)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> SessionEnvelope:
    session = await session_service.get_session(session_id, context.team_id)
    return SessionEnvelope(session=SessionResponse.model_validate(session))


@router.patch(
    "/{session_id}",
    response_model=SessionEnvelope,
    summary="Update a session",
    description="Change the status and/or company name of one of the team's sessions",
    operation_id="update_session",
)
async def update_session(
    session_id: UUID,
    request: SessionUpdateRequest,
    context: Annotated[TeamContext, Depends(get_team_context)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
) -> SessionEnvelope:
    """Update a session.

    Status must be one of active, demo_booked, won or lost. A session owned by
    another team is reported as not found.
    """
    session = await session_service.update_session(
        session_id,
        context.team_id,
        status=request.status,
        company_name=request.company_name,
    )
    LOGGER.info(
        "Session updated",
        extra={"session_id": str(session_id), "status": session.status},
    )
    return SessionEnvelope(session=SessionResponse.model_validate(session))
