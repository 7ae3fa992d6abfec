"""Sales-script generation endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sales_copilot.core.auth import get_team_context
from sales_copilot.dependencies import get_generation_service
from sales_copilot.schemas.auth import TeamContext
from sales_copilot.schemas.common import ErrorResponse
from sales_copilot.schemas.scripts import GenerateRequest, GenerateResponse
from sales_copilot.services.generation_service import GenerationService
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=GenerateResponse,
    summary="Generate a sales script",
    description="Generate a sectioned sales script for the caller's team and store it",
    operation_id="generate_sales_script",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_script(
    request: GenerateRequest,
    context: Annotated[TeamContext, Depends(get_team_context)],
    generation_service: Annotated[GenerationService, Depends(get_generation_service)],
) -> GenerateResponse:
    """Generate a sales script.

    The script is tied to request.session_id when given, otherwise to a
    freshly created session. script_id is null when storing the script failed.
    """
    LOGGER.info(
        "Generating sales script",
        extra={"team_id": str(context.team_id), "session_id": str(request.session_id)},
    )
    result = await generation_service.generate(
        request.input, context, session_id=request.session_id
    )
    sections = result.sections

    return GenerateResponse(
        raw_output=result.raw_output,
        summary=sections.summary,
        opening=sections.opening,
        qualifying=sections.qualifying_questions,
        value_framing=sections.value_framing,
        objections=sections.objections,
        closing=sections.closing,
        coach_tips=sections.coach_tips,
        session_id=result.session_id,
        script_id=result.script_id,
    )
