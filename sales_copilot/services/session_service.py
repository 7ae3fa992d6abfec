"""Sales session lifecycle.

A session starts ``active`` and is moved to ``demo_booked``, ``won`` or
``lost`` when the engagement ends. Status values are validated against the
fixed enumeration only; the stored value is overwritten, so concurrent
updates are last-writer-wins.
"""

from enum import Enum
from typing import Optional, Sequence
from uuid import UUID

from sales_copilot.core.exceptions import (
    InvalidStatusError,
    SessionNotFoundError,
    ValidationError,
)
from sales_copilot.database.models import SalesSession
from sales_copilot.repositories.session_repository import SessionRepository
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)


class SessionStatus(str, Enum):
    """Lifecycle status of a sales session."""

    ACTIVE = "active"
    DEMO_BOOKED = "demo_booked"
    WON = "won"
    LOST = "lost"


CLOSED_STATUSES = frozenset({SessionStatus.DEMO_BOOKED, SessionStatus.WON, SessionStatus.LOST})


def parse_status(value: object) -> SessionStatus:
    """Validate a raw status value.

    Matching is exact: ``"Won"``, ``" won"`` and ``""`` are all rejected.

    Raises:
        InvalidStatusError: If the value is not one of the four statuses
    """
    if isinstance(value, str):
        for status in SessionStatus:
            if status.value == value:
                return status
    raise InvalidStatusError(f"Invalid status: {value!r}")


def normalize_company_name(name: Optional[str]) -> Optional[str]:
    """Trim a company name; blank names become None."""
    if name is None:
        return None
    trimmed = name.strip()
    return trimmed or None


def is_closed(session: SalesSession) -> bool:
    """Whether a session has reached one of the closing statuses."""
    return session.status in {status.value for status in CLOSED_STATUSES}


class SessionService:
    """Service for session lifecycle operations, scoped by team."""

    def __init__(self, repository: SessionRepository):
        self.repository = repository

    async def create_session(
        self,
        team_id: UUID,
        user_id: str,
        company_name: Optional[str] = None,
    ) -> SalesSession:
        """Start a new engagement. The status is always ``active``."""
        session = await self.repository.create_session(
            team_id=team_id,
            created_by=user_id,
            company_name=normalize_company_name(company_name),
            status=SessionStatus.ACTIVE.value,
        )
        LOGGER.info(
            "Created sales session",
            extra={"session_id": str(session.id), "team_id": str(team_id)},
        )
        return session

    async def get_session(self, session_id: UUID, team_id: UUID) -> SalesSession:
        """Get a team's session.

        Raises:
            SessionNotFoundError: If the id does not exist for this team
        """
        session = await self.repository.get_for_team(session_id, team_id)
        if session is None:
            raise SessionNotFoundError()
        return session

    async def list_sessions(
        self, team_id: UUID, status: Optional[str] = None
    ) -> Sequence[SalesSession]:
        """List a team's sessions, optionally filtered by a valid status."""
        status_value = parse_status(status).value if status is not None else None
        return await self.repository.list_for_team(team_id, status=status_value)

    async def set_status(self, session_id: UUID, team_id: UUID, status: object) -> SalesSession:
        """Overwrite the status of a team's session.

        Raises:
            InvalidStatusError: Before any storage access, for unknown values
            SessionNotFoundError: If no row matches id and team
        """
        return await self.update_session(session_id, team_id, status=status)

    async def set_company_name(
        self, session_id: UUID, team_id: UUID, name: Optional[str]
    ) -> SalesSession:
        """Rename a team's session; blank names clear the label."""
        return await self._apply(session_id, team_id, {"company_name": normalize_company_name(name)})

    async def update_session(
        self,
        session_id: UUID,
        team_id: UUID,
        status: Optional[object] = None,
        company_name: Optional[str] = None,
    ) -> SalesSession:
        """Apply a status and/or company name change in one write.

        Raises:
            InvalidStatusError: If ``status`` is given and not allowed
            ValidationError: If neither field is given
            SessionNotFoundError: If no row matches id and team
        """
        updates = {}
        if status is not None:
            updates["status"] = parse_status(status).value
        if company_name is not None:
            updates["company_name"] = normalize_company_name(company_name)

        if not updates:
            raise ValidationError("Nothing to update")

        return await self._apply(session_id, team_id, updates)

    async def _apply(self, session_id: UUID, team_id: UUID, updates: dict) -> SalesSession:
        session = await self.repository.update_for_team(session_id, team_id, **updates)
        if session is None:
            LOGGER.warning(
                "Session update matched no row",
                extra={"session_id": str(session_id), "team_id": str(team_id)},
            )
            raise SessionNotFoundError()

        LOGGER.info(
            "Updated sales session",
            extra={"session_id": str(session_id), "fields": sorted(updates)},
        )
        return session
