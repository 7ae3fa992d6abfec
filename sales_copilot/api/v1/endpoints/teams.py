"""Team onboarding endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from sales_copilot.core.auth import get_current_user, get_team_context
from sales_copilot.dependencies import get_team_service
from sales_copilot.schemas.auth import CurrentUser, TeamContext
from sales_copilot.schemas.teams import (
    PlaybookEnvelope,
    TeamCreateRequest,
    TeamEnvelope,
    TeamResponse,
)
from sales_copilot.services.team_service import TeamService
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=TeamEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a team",
    description="Create a team with its playbook and make the caller its owner",
    operation_id="create_team",
)
async def create_team(
    request: TeamCreateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    team_service: Annotated[TeamService, Depends(get_team_service)],
) -> TeamEnvelope:
    team = await team_service.create_team(current_user.id, request)
    LOGGER.info(f"Team {team.id} created by user {current_user.id}")
    return TeamEnvelope(team=TeamResponse.model_validate(team))


@router.get(
    "/playbook",
    response_model=PlaybookEnvelope,
    summary="Get the team playbook",
    operation_id="get_team_playbook",
)
async def get_playbook(
    context: Annotated[TeamContext, Depends(get_team_context)],
    team_service: Annotated[TeamService, Depends(get_team_service)],
) -> PlaybookEnvelope:
    playbook = await team_service.get_playbook(context.team_id)
    return PlaybookEnvelope(playbook=playbook)
