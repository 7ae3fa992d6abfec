"""Team onboarding and playbook access."""

from uuid import UUID

from sales_copilot.core.exceptions import NoTeamMembershipError, ValidationError
from sales_copilot.database.models import Team
from sales_copilot.repositories.team_repository import TeamRepository
from sales_copilot.schemas.auth import TeamContext
from sales_copilot.schemas.teams import Playbook, TeamCreateRequest
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)


def _clean(value):
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


class TeamService:
    """Service for teams and membership resolution."""

    def __init__(self, repository: TeamRepository):
        self.repository = repository

    async def resolve_context(self, user_id: str) -> TeamContext:
        """Resolve the team a user acts for.

        Raises:
            NoTeamMembershipError: If the user is in no team
        """
        membership = await self.repository.get_membership(user_id)
        if membership is None:
            LOGGER.warning(f"User {user_id} has no team membership")
            raise NoTeamMembershipError()
        return TeamContext(user_id=user_id, team_id=membership.team_id, role=membership.role)

    async def create_team(self, owner_id: str, request: TeamCreateRequest) -> Team:
        """Create a team with the caller as owner.

        Raises:
            ValidationError: If the name is blank or the user already has a team
        """
        name = _clean(request.name)
        if not name:
            raise ValidationError("Team name is required")

        if await self.repository.get_membership(owner_id) is not None:
            raise ValidationError("User already belongs to a team")

        return await self.repository.create_with_owner(
            name=name,
            owner_id=owner_id,
            sales_motion=request.sales_motion.value if request.sales_motion else None,
            tone_default=_clean(request.tone_default),
            no_go_phrases=_clean(request.no_go_phrases),
            primary_objections=_clean(request.primary_objections),
        )

    async def get_playbook(self, team_id: UUID) -> Playbook:
        """Playbook fields of a team; empty playbook if the team row is gone."""
        team = await self.repository.get_by_id(team_id)
        if team is None:
            return Playbook()
        return Playbook.model_validate(team)
