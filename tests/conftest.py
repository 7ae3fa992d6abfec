"""Pytest configuration and shared fixtures."""

import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from sales_copilot.core.auth import get_current_user, get_team_context
from sales_copilot.database.models import SalesScript, SalesSession
from sales_copilot.main import app
from sales_copilot.schemas.auth import CurrentUser, TeamContext


CANONICAL_OUTPUT = """[SUMMARY]
Mid-sized logistics firm losing deals to slow quoting.

[OPENING]
You are quoting in days while your competitors quote in minutes.

[QUALIFYING QUESTIONS]
1. How many quotes slip past 24 hours each week?

[VALUE FRAMING]
- Every slow quote is a lost deal.

[OBJECTIONS]
"We have no budget." Budget follows lost revenue. Let us size that first.

[CLOSING]
Let us book 20 minutes on Thursday at 10.

[COACH TIPS]
- Lead with the cost of delay.
"""


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def team_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def team_context(team_id: uuid.UUID) -> TeamContext:
    """Caller acting for a team.

    Returns:
        TeamContext: Context as resolved by the auth boundary
    """
    return TeamContext(user_id="user-123", team_id=team_id, role="owner")


@pytest.fixture
def authenticated(team_context: TeamContext) -> TeamContext:
    """Bypass token verification and team lookup for endpoint tests."""
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(
        id=team_context.user_id, email="seller@example.com"
    )
    app.dependency_overrides[get_team_context] = lambda: team_context
    return team_context


@pytest.fixture
def sample_raw_output() -> str:
    """Model output with all seven markers in canonical order."""
    return CANONICAL_OUTPUT


@pytest.fixture
def make_session(team_id: uuid.UUID):
    """Factory for detached session rows."""

    def _make(status: str = "active", company_name=None, owner_team=None) -> SalesSession:
        now = datetime.now(timezone.utc)
        return SalesSession(
            id=uuid.uuid4(),
            team_id=owner_team or team_id,
            created_by="user-123",
            company_name=company_name,
            status=status,
            created_at=now,
            updated_at=now,
        )

    return _make


@pytest.fixture
def make_script(team_id: uuid.UUID):
    """Factory for detached script rows."""

    def _make(session_id=None, **fields) -> SalesScript:
        values = {
            "summary": "",
            "opening": "",
            "qualifying_questions": "",
            "value_framing": "",
            "objections": "",
            "closing": "",
            "coach_tips": "",
        }
        values.update(fields)
        return SalesScript(
            id=uuid.uuid4(),
            session_id=session_id,
            team_id=team_id,
            created_by="user-123",
            input=values.pop("input", "Pitch our CRM to a logistics firm"),
            raw_output=values.pop("raw_output", ""),
            created_at=datetime.now(timezone.utc),
            **values,
        )

    return _make
