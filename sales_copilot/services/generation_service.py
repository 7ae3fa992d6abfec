"""Sales-script generation orchestrator.

Composes the prompt from the team playbook and the fixed system prompt, calls
the completion service once, parses the tagged output and stores the result.
Storage is best-effort: the generated text is returned even if saving it fails.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from sales_copilot.core.config import ClosedSessionPolicy, GenerationSettings
from sales_copilot.core.exceptions import (
    APIClientError,
    GenerationFailedError,
    MissingInputError,
    PersistenceError,
    SessionClosedError,
)
from sales_copilot.database.models import SalesSession
from sales_copilot.prompts.system_prompts import compose_system_instruction
from sales_copilot.repositories.script_repository import ScriptRepository
from sales_copilot.repositories.team_repository import TeamRepository
from sales_copilot.schemas.auth import TeamContext
from sales_copilot.schemas.teams import Playbook
from sales_copilot.services.section_parser import ScriptSections, parse_script_output
from sales_copilot.services.session_service import SessionService, is_closed
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)


class CompletionClient(Protocol):
    async def generate_content(
        self, contents: str, system_instruction: Optional[str] = None
    ) -> str: ...


@dataclass
class GeneratedScript:
    """Result of one generation request."""

    raw_output: str
    sections: ScriptSections
    session_id: Optional[UUID] = None
    script_id: Optional[UUID] = None


class GenerationService:
    """Orchestrates prompt composition, completion, parsing and storage."""

    def __init__(
        self,
        llm_client: CompletionClient,
        script_repository: ScriptRepository,
        team_repository: TeamRepository,
        session_service: SessionService,
        generation_settings: GenerationSettings,
        timeout_seconds: float = 90,
    ):
        """Initialize the orchestrator.

        Args:
            llm_client: Completion service client
            script_repository: Storage for generated scripts
            team_repository: Source of the team playbook
            session_service: Session lookup and lazy creation
            generation_settings: Closed-session policy, language, lazy sessions
            timeout_seconds: Upper bound for the completion call
        """
        self.llm_client = llm_client
        self.script_repository = script_repository
        self.team_repository = team_repository
        self.session_service = session_service
        self.settings = generation_settings
        self.timeout_seconds = timeout_seconds

    async def generate(
        self,
        user_input: Optional[str],
        context: TeamContext,
        session_id: Optional[UUID] = None,
    ) -> GeneratedScript:
        """Generate, parse and store a sales script.

        Args:
            user_input: Free-text description of the sales situation
            context: Caller and team resolved by the auth boundary
            session_id: Optional session owned by the caller's team

        Returns:
            GeneratedScript with the raw text, parsed sections and the ids of
            the session and the stored script (None if storage failed)

        Raises:
            MissingInputError: If the input is blank
            SessionNotFoundError: If session_id is not one of the team's
            SessionClosedError: If the session is closed and policy is block
            GenerationFailedError: If the completion call fails or times out
        """
        if not isinstance(user_input, str) or not user_input.strip():
            raise MissingInputError()

        session = await self._get_requested_session(context, session_id)
        playbook = await self._load_playbook(context.team_id)
        system_instruction = compose_system_instruction(
            playbook, language=self.settings.response_language
        )

        raw_output = await self._complete(user_input, system_instruction)
        sections = parse_script_output(raw_output)
        if sections.is_empty and raw_output:
            LOGGER.warning(
                "No section markers found in model output",
                extra={"team_id": str(context.team_id), "output_length": len(raw_output)},
            )

        if session is None:
            session = await self._create_session_lazily(context)

        resolved_session_id = session.id if session is not None else None
        script_id = await self._store(user_input, raw_output, sections, resolved_session_id, context)

        return GeneratedScript(
            raw_output=raw_output,
            sections=sections,
            session_id=resolved_session_id,
            script_id=script_id,
        )

    async def _get_requested_session(
        self, context: TeamContext, session_id: Optional[UUID]
    ) -> Optional[SalesSession]:
        if session_id is None:
            return None

        session = await self.session_service.get_session(session_id, context.team_id)
        if is_closed(session) and self.settings.closed_session_policy == ClosedSessionPolicy.BLOCK:
            raise SessionClosedError(f"Session is closed ({session.status})")
        return session

    async def _create_session_lazily(self, context: TeamContext) -> Optional[SalesSession]:
        # Called only after a successful completion
        if not self.settings.auto_create_session:
            return None

        try:
            return await self.session_service.create_session(context.team_id, context.user_id)
        except SQLAlchemyError as e:
            LOGGER.error(
                "Failed to create session for generated script",
                exc_info=True,
                extra={"team_id": str(context.team_id), "error": str(e)},
            )
            return None

    async def _load_playbook(self, team_id: UUID) -> Optional[Playbook]:
        try:
            team = await self.team_repository.get_by_id(team_id)
        except SQLAlchemyError as e:
            LOGGER.warning(f"Could not load team playbook, using defaults: {e}")
            # The failed statement aborted the request transaction
            await self.team_repository.session.rollback()
            return None
        return Playbook.model_validate(team) if team is not None else None

    async def _complete(self, user_input: str, system_instruction: str) -> str:
        try:
            return await asyncio.wait_for(
                self.llm_client.generate_content(
                    contents=user_input, system_instruction=system_instruction
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            LOGGER.error(f"Completion timed out after {self.timeout_seconds}s")
            raise GenerationFailedError("Script generation timed out", original_error=e) from e
        except APIClientError as e:
            LOGGER.error(f"Completion service failed: {e}", exc_info=True)
            raise GenerationFailedError(original_error=e) from e

    async def _store(
        self,
        user_input: str,
        raw_output: str,
        sections: ScriptSections,
        session_id: Optional[UUID],
        context: TeamContext,
    ) -> Optional[UUID]:
        try:
            script = await self.script_repository.create_script(
                input_text=user_input,
                raw_output=raw_output,
                sections=sections,
                session_id=session_id,
                team_id=context.team_id,
                created_by=context.user_id,
            )
        except PersistenceError as e:
            LOGGER.error(
                "Failed to store generated script",
                exc_info=True,
                extra={"team_id": str(context.team_id), "error": str(e)},
            )
            return None

        LOGGER.info(
            "Stored generated script",
            extra={"script_id": str(script.id), "session_id": str(session_id)},
        )
        return script.id
