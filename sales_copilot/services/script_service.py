"""Read access to stored scripts."""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sales_copilot.database.models import SalesScript
from sales_copilot.repositories.script_repository import ScriptRepository


class ScriptService:
    """Service for script history, scoped by team."""

    def __init__(self, repository: ScriptRepository, default_limit: int = 50):
        self.repository = repository
        self.default_limit = default_limit

    async def list_history(
        self,
        team_id: UUID,
        session_id: Optional[UUID] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Newest-first history joined with session company name and status."""
        return await self.repository.list_history(
            team_id, session_id=session_id, limit=limit or self.default_limit
        )

    async def latest(self, team_id: UUID) -> Optional[SalesScript]:
        """Most recent script of the team, if any."""
        return await self.repository.get_latest(team_id)
