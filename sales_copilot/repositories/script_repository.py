"""Repository for generated sales scripts."""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sales_copilot.core.exceptions import PersistenceError
from sales_copilot.database.models import SalesScript, SalesSession
from sales_copilot.repositories.base_repository import BaseRepository
from sales_copilot.services.section_parser import ScriptSections


class ScriptRepository(BaseRepository[SalesScript]):
    """Repository for SalesScript records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, SalesScript)

    async def create_script(
        self,
        input_text: str,
        raw_output: str,
        sections: ScriptSections,
        session_id: Optional[uuid.UUID] = None,
        team_id: Optional[uuid.UUID] = None,
        created_by: Optional[str] = None,
    ) -> SalesScript:
        """Store one generation result.

        The raw output is stored verbatim alongside whatever the parser
        recovered, including all-empty sections.

        Raises:
            PersistenceError: If the insert fails
        """
        try:
            return await self.create(
                input=input_text,
                raw_output=raw_output,
                session_id=session_id,
                team_id=team_id,
                created_by=created_by,
                created_at=datetime.now(timezone.utc),
                **sections.to_dict(),
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to store sales script", original_error=e) from e

    async def list_history(
        self,
        team_id: uuid.UUID,
        session_id: Optional[uuid.UUID] = None,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        """List a team's scripts, newest first, with session display fields.

        Args:
            team_id: Team whose scripts are listed
            session_id: Optional filter on a single session
            limit: Maximum number of rows

        Returns:
            Rows with id, created_at, input, raw_output, session_id,
            company_name and status (the last two None for unlinked scripts)
        """
        query = (
            select(
                SalesScript.id,
                SalesScript.created_at,
                SalesScript.input,
                SalesScript.raw_output,
                SalesScript.session_id,
                SalesSession.company_name,
                SalesSession.status,
            )
            .outerjoin(SalesSession, SalesScript.session_id == SalesSession.id)
            .where(SalesScript.team_id == team_id)
        )
        if session_id is not None:
            query = query.where(SalesScript.session_id == session_id)
        query = query.order_by(SalesScript.created_at.desc(), SalesScript.id.desc()).limit(limit)

        result = await self.session.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def get_latest(self, team_id: uuid.UUID) -> Optional[SalesScript]:
        """Get the most recent script of a team."""
        query = (
            select(SalesScript)
            .where(SalesScript.team_id == team_id)
            .order_by(SalesScript.created_at.desc(), SalesScript.id.desc())
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
