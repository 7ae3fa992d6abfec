"""Repository for sales session data access.

Every lookup and update is scoped to a team: a session id that belongs to
another team behaves exactly like an id that does not exist.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sales_copilot.database.models import SalesSession
from sales_copilot.repositories.base_repository import BaseRepository


class SessionRepository(BaseRepository[SalesSession]):
    """Repository for SalesSession records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, SalesSession)

    async def create_session(
        self,
        team_id: uuid.UUID,
        created_by: str,
        company_name: Optional[str] = None,
        status: str = "active",
    ) -> SalesSession:
        """Create a new sales session.

        Args:
            team_id: Owning team
            created_by: Identity-provider user id of the creator
            company_name: Normalized display label, or None
            status: Initial status

        Returns:
            Created SalesSession instance
        """
        now = datetime.now(timezone.utc)
        return await self.create(
            team_id=team_id,
            created_by=created_by,
            company_name=company_name,
            status=status,
            created_at=now,
            updated_at=now,
        )

    async def get_for_team(self, session_id: uuid.UUID, team_id: uuid.UUID) -> Optional[SalesSession]:
        """Get a session only if it belongs to the given team."""
        query = select(SalesSession).where(
            SalesSession.id == session_id,
            SalesSession.team_id == team_id,
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_for_team(
        self,
        team_id: uuid.UUID,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> Sequence[SalesSession]:
        """List a team's sessions, newest first."""
        query = select(SalesSession).where(SalesSession.team_id == team_id)
        if status is not None:
            query = query.where(SalesSession.status == status)
        query = query.order_by(SalesSession.created_at.desc(), SalesSession.id.desc()).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def update_for_team(
        self,
        session_id: uuid.UUID,
        team_id: uuid.UUID,
        **updates: Any,
    ) -> Optional[SalesSession]:
        """Apply field updates to a team's session.

        Concurrent updates to the same row are last-writer-wins.

        Returns:
            Updated SalesSession, or None if no row matched id and team
        """
        try:
            instance = await self.get_for_team(session_id, team_id)
            if instance is None:
                return None

            for key, value in updates.items():
                setattr(instance, key, value)
            instance.updated_at = datetime.now(timezone.utc)

            await self.session.flush()
            await self.session.commit()
            return instance
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating session {session_id}: {str(e)}", exc_info=True)
            await self.session.rollback()
            raise
