"""Repository for teams, memberships and playbooks."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sales_copilot.database.models import Team, TeamMember
from sales_copilot.repositories.base_repository import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """Repository for Team and TeamMember records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Team)

    async def get_membership(self, user_id: str) -> Optional[TeamMember]:
        """Get the team membership of a user.

        A user belongs to at most one team; the oldest membership wins if
        the data says otherwise.
        """
        query = (
            select(TeamMember)
            .where(TeamMember.user_id == user_id)
            .order_by(TeamMember.created_at.asc())
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create_with_owner(
        self,
        name: str,
        owner_id: str,
        sales_motion: Optional[str] = None,
        tone_default: Optional[str] = None,
        no_go_phrases: Optional[str] = None,
        primary_objections: Optional[str] = None,
    ) -> Team:
        """Create a team and its owner membership in one transaction."""
        now = datetime.now(timezone.utc)
        team = Team(
            id=uuid.uuid4(),
            name=name,
            owner_id=owner_id,
            sales_motion=sales_motion,
            tone_default=tone_default,
            no_go_phrases=no_go_phrases,
            primary_objections=primary_objections,
            created_at=now,
        )
        member = TeamMember(team_id=team.id, user_id=owner_id, role="owner", created_at=now)
        try:
            self.session.add(team)
            self.session.add(member)
            await self.session.flush()
            await self.session.commit()
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating team {name!r}: {str(e)}", exc_info=True)
            await self.session.rollback()
            raise

        self.logger.info(f"Created team {team.id} owned by {owner_id}")
        return team
