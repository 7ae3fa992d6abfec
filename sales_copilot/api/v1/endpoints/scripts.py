"""Script history endpoints."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from sales_copilot.core.auth import get_team_context
from sales_copilot.dependencies import get_script_service
from sales_copilot.schemas.auth import TeamContext
from sales_copilot.schemas.scripts import (
    LatestScriptResponse,
    ScriptDetail,
    ScriptHistoryItem,
    ScriptHistoryResponse,
)
from sales_copilot.services.script_service import ScriptService

router = APIRouter()


@router.get(
    "",
    response_model=ScriptHistoryResponse,
    summary="List generated scripts",
    description="Newest-first history with the owning session's company name and status",
    operation_id="list_scripts",
)
async def list_scripts(
    context: Annotated[TeamContext, Depends(get_team_context)],
    script_service: Annotated[ScriptService, Depends(get_script_service)],
    session_id: Annotated[Optional[UUID], Query()] = None,
    limit: Annotated[Optional[int], Query(ge=1, le=200)] = None,
) -> ScriptHistoryResponse:
    rows = await script_service.list_history(context.team_id, session_id=session_id, limit=limit)
    return ScriptHistoryResponse(scripts=[ScriptHistoryItem(**row) for row in rows])


@router.get(
    "/latest",
    response_model=LatestScriptResponse,
    summary="Get the latest script",
    operation_id="get_latest_script",
)
async def get_latest_script(
    context: Annotated[TeamContext, Depends(get_team_context)],
    script_service: Annotated[ScriptService, Depends(get_script_service)],
) -> LatestScriptResponse:
    """Most recent script of the caller's team; script is null if there is none."""
    script = await script_service.latest(context.team_id)
    return LatestScriptResponse(
        script=ScriptDetail.model_validate(script) if script is not None else None
    )
