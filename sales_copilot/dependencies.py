"""Dependency injection factories for FastAPI routes.

Repositories are bound to the request's database session; shared clients
come from app.state, where create_app puts them.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sales_copilot.core.config import Settings
from sales_copilot.core.database import get_async_session
from sales_copilot.core.llm_client import ChatCompletionClient
from sales_copilot.repositories.script_repository import ScriptRepository
from sales_copilot.repositories.session_repository import SessionRepository
from sales_copilot.repositories.team_repository import TeamRepository
from sales_copilot.services.generation_service import GenerationService
from sales_copilot.services.script_service import ScriptService
from sales_copilot.services.session_service import SessionService
from sales_copilot.services.team_service import TeamService


async def get_session_repository(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> SessionRepository:
    """Get session repository instance.

    Args:
        db_session: Database session from dependency injection

    Returns:
        SessionRepository: Repository for sales session operations
    """
    return SessionRepository(db_session)


async def get_script_repository(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> ScriptRepository:
    """Get script repository instance.

    Args:
        db_session: Database session from dependency injection

    Returns:
        ScriptRepository: Repository for generated script operations
    """
    return ScriptRepository(db_session)


async def get_team_repository(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> TeamRepository:
    return TeamRepository(db_session)


async def get_session_service(
    repository: Annotated[SessionRepository, Depends(get_session_repository)]
) -> SessionService:
    return SessionService(repository)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_script_service(
    repository: Annotated[ScriptRepository, Depends(get_script_repository)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> ScriptService:
    return ScriptService(repository, default_limit=app_settings.generation.history_limit)


async def get_team_service(
    repository: Annotated[TeamRepository, Depends(get_team_repository)]
) -> TeamService:
    return TeamService(repository)


def get_llm_client(request: Request) -> ChatCompletionClient:
    return request.app.state.llm_client


async def get_generation_service(
    llm_client: Annotated[ChatCompletionClient, Depends(get_llm_client)],
    script_repository: Annotated[ScriptRepository, Depends(get_script_repository)],
    team_repository: Annotated[TeamRepository, Depends(get_team_repository)],
    session_service: Annotated[SessionService, Depends(get_session_service)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> GenerationService:
    """Get the generation orchestrator.

    All repositories share the request's database session. Without an explicit
    GENERATION_TIMEOUT_SECONDS the overall bound covers every retry attempt of
    the completion client, backoff included.

    Returns:
        GenerationService: Orchestrator configured from settings
    """
    return GenerationService(
        llm_client=llm_client,
        script_repository=script_repository,
        team_repository=team_repository,
        session_service=session_service,
        generation_settings=app_settings.generation,
        timeout_seconds=app_settings.generation.timeout_seconds or llm_client.total_timeout,
    )
