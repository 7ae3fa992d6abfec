"""Tests for API endpoints."""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from sales_copilot.core.auth import get_jwt_verifier, get_team_context
from sales_copilot.core.exceptions import (
    GenerationFailedError,
    InvalidStatusError,
    MissingInputError,
    NoTeamMembershipError,
    SessionClosedError,
    SessionNotFoundError,
    ValidationError,
)
from sales_copilot.core.jwt import JWTVerifier
from sales_copilot.dependencies import (
    get_generation_service,
    get_script_service,
    get_session_service,
    get_team_service,
)
from sales_copilot.database.models import Team
from sales_copilot.main import app
from sales_copilot.schemas.auth import TeamContext
from sales_copilot.schemas.teams import Playbook
from sales_copilot.services.generation_service import GeneratedScript
from sales_copilot.services.section_parser import parse_script_output


def override(dependency, mock) -> None:
    app.dependency_overrides[dependency] = lambda: mock


class TestAuthBoundary:
    def test_missing_token_is_unauthorized(self, test_client: TestClient) -> None:
        response = test_client.post("/api/v1/generate", json={"input": "Pitch"})

        assert response.status_code == 401
        assert response.json() == {"ok": False, "error": "Unauthorized"}

    def test_invalid_token_is_unauthorized(self, test_client: TestClient) -> None:
        override(get_jwt_verifier, JWTVerifier(supabase_url="https://project.supabase.co", jwt_secret="s" * 32))

        response = test_client.get(
            "/api/v1/sessions", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401
        assert response.json()["ok"] is False

    def test_user_without_team_is_forbidden(self, test_client: TestClient) -> None:
        def no_team():
            raise NoTeamMembershipError()

        app.dependency_overrides[get_team_context] = no_team

        response = test_client.get("/api/v1/sessions")

        assert response.status_code == 403
        assert response.json() == {"ok": False, "error": "No team connected to user"}


class TestGenerateEndpoint:
    def test_generate_success(
        self, test_client: TestClient, authenticated: TeamContext, sample_raw_output: str
    ) -> None:
        session_id, script_id = uuid.uuid4(), uuid.uuid4()
        service = MagicMock()
        service.generate = AsyncMock(
            return_value=GeneratedScript(
                raw_output=sample_raw_output,
                sections=parse_script_output(sample_raw_output),
                session_id=session_id,
                script_id=script_id,
            )
        )
        override(get_generation_service, service)

        response = test_client.post(
            "/api/v1/generate", json={"input": "Pitch our CRM", "session_id": str(session_id)}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["raw_output"] == sample_raw_output
        assert data["qualifying"] == "1. How many quotes slip past 24 hours each week?"
        assert data["closing"] == "Let us book 20 minutes on Thursday at 10."
        assert data["session_id"] == str(session_id)
        assert data["script_id"] == str(script_id)
        service.generate.assert_awaited_once_with("Pitch our CRM", authenticated, session_id=session_id)

    def test_generate_with_storage_failure_still_returns_text(
        self, test_client: TestClient, authenticated: TeamContext
    ) -> None:
        service = MagicMock()
        service.generate = AsyncMock(
            return_value=GeneratedScript(raw_output="plain", sections=parse_script_output("plain"))
        )
        override(get_generation_service, service)

        response = test_client.post("/api/v1/generate", json={"input": "Pitch"})

        assert response.status_code == 200
        assert response.json()["raw_output"] == "plain"
        assert response.json()["script_id"] is None

    @pytest.mark.parametrize(
        "error,status_code,message",
        [
            (MissingInputError(), 400, "Missing input"),
            (SessionNotFoundError(), 404, "Session not found for this team"),
            (SessionClosedError(), 409, "Session is closed"),
            (GenerationFailedError(), 500, "Script generation failed"),
        ],
    )
    def test_generate_errors(
        self, test_client: TestClient, authenticated, error, status_code, message
    ) -> None:
        service = MagicMock()
        service.generate = AsyncMock(side_effect=error)
        override(get_generation_service, service)

        response = test_client.post("/api/v1/generate", json={"input": ""})

        assert response.status_code == status_code
        assert response.json() == {"ok": False, "error": message}

    def test_unexpected_error_does_not_leak(self, authenticated) -> None:
        service = MagicMock()
        service.generate = AsyncMock(side_effect=RuntimeError("password=hunter2"))
        override(get_generation_service, service)

        client = TestClient(app, raise_server_exceptions=False)
        response = client.post("/api/v1/generate", json={"input": "Pitch"})

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "Internal server error"}


class TestSessionEndpoints:
    def test_create_session(self, test_client: TestClient, authenticated, make_session) -> None:
        service = MagicMock()
        service.create_session = AsyncMock(return_value=make_session(company_name="Acme AB"))
        override(get_session_service, service)

        response = test_client.post("/api/v1/sessions", json={"company_name": "  Acme AB  "})

        assert response.status_code == 201
        session = response.json()["session"]
        assert session["company_name"] == "Acme AB"
        assert session["status"] == "active"
        service.create_session.assert_awaited_once_with(
            authenticated.team_id, authenticated.user_id, company_name="  Acme AB  "
        )

    def test_create_session_without_body_fields(self, test_client: TestClient, authenticated, make_session) -> None:
        service = MagicMock()
        service.create_session = AsyncMock(return_value=make_session())
        override(get_session_service, service)

        response = test_client.post("/api/v1/sessions", json={})

        assert response.status_code == 201
        assert response.json()["session"]["company_name"] is None

    def test_list_sessions_with_status_filter(self, test_client: TestClient, authenticated, make_session) -> None:
        service = MagicMock()
        service.list_sessions = AsyncMock(return_value=[make_session(status="won")])
        override(get_session_service, service)

        response = test_client.get("/api/v1/sessions", params={"status": "won"})

        assert response.status_code == 200
        assert [s["status"] for s in response.json()["sessions"]] == ["won"]
        service.list_sessions.assert_awaited_once_with(authenticated.team_id, status="won")

    def test_get_session_not_found(self, test_client: TestClient, authenticated) -> None:
        service = MagicMock()
        service.get_session = AsyncMock(side_effect=SessionNotFoundError())
        override(get_session_service, service)

        response = test_client.get(f"/api/v1/sessions/{uuid.uuid4()}")

        assert response.status_code == 404

    def test_patch_status(self, test_client: TestClient, authenticated, make_session) -> None:
        session = make_session(status="demo_booked")
        service = MagicMock()
        service.update_session = AsyncMock(return_value=session)
        override(get_session_service, service)

        response = test_client.patch(f"/api/v1/sessions/{session.id}", json={"status": "demo_booked"})

        assert response.status_code == 200
        assert response.json()["session"]["status"] == "demo_booked"
        service.update_session.assert_awaited_once_with(
            session.id, authenticated.team_id, status="demo_booked", company_name=None
        )

    @pytest.mark.parametrize(
        "error,status_code",
        [
            (InvalidStatusError(), 400),
            (ValidationError("Nothing to update"), 400),
            (SessionNotFoundError(), 404),
        ],
    )
    def test_patch_errors(self, test_client: TestClient, authenticated, error, status_code) -> None:
        service = MagicMock()
        service.update_session = AsyncMock(side_effect=error)
        override(get_session_service, service)

        response = test_client.patch(f"/api/v1/sessions/{uuid.uuid4()}", json={"status": "Won"})

        assert response.status_code == status_code
        assert response.json() == {"ok": False, "error": error.message}


class TestScriptEndpoints:
    def test_history(self, test_client: TestClient, authenticated) -> None:
        session_id = uuid.uuid4()
        row = {
            "id": str(uuid.uuid4()),
            "created_at": "2026-01-05T10:00:00+00:00",
            "input": "Pitch",
            "raw_output": "[SUMMARY]\nFoo",
            "session_id": str(session_id),
            "company_name": "Acme AB",
            "status": "active",
        }
        service = MagicMock()
        service.list_history = AsyncMock(return_value=[row])
        override(get_script_service, service)

        response = test_client.get(
            "/api/v1/scripts", params={"session_id": str(session_id), "limit": 10}
        )

        assert response.status_code == 200
        scripts = response.json()["scripts"]
        assert scripts[0]["company_name"] == "Acme AB"
        assert scripts[0]["status"] == "active"
        service.list_history.assert_awaited_once_with(
            authenticated.team_id, session_id=session_id, limit=10
        )

    def test_latest_script(self, test_client: TestClient, authenticated, make_script) -> None:
        script = make_script(qualifying_questions="Q1", raw_output="[QUALIFYING QUESTIONS]\nQ1")
        service = MagicMock()
        service.latest = AsyncMock(return_value=script)
        override(get_script_service, service)

        response = test_client.get("/api/v1/scripts/latest")

        assert response.status_code == 200
        assert response.json()["script"]["qualifying_questions"] == "Q1"

    def test_latest_script_when_none(self, test_client: TestClient, authenticated) -> None:
        service = MagicMock()
        service.latest = AsyncMock(return_value=None)
        override(get_script_service, service)

        response = test_client.get("/api/v1/scripts/latest")

        assert response.json() == {"script": None}


class TestTeamEndpoints:
    def test_create_team(self, test_client: TestClient, authenticated) -> None:
        team = Team(
            id=uuid.uuid4(),
            name="Nordic Sales",
            owner_id=authenticated.user_id,
            sales_motion="enterprise",
            created_at=datetime.now(timezone.utc),
        )
        service = MagicMock()
        service.create_team = AsyncMock(return_value=team)
        override(get_team_service, service)

        response = test_client.post(
            "/api/v1/teams", json={"name": "Nordic Sales", "sales_motion": "enterprise"}
        )

        assert response.status_code == 201
        assert response.json()["team"]["name"] == "Nordic Sales"

    def test_create_team_rejects_unknown_sales_motion(self, test_client: TestClient, authenticated) -> None:
        override(get_team_service, MagicMock())

        response = test_client.post("/api/v1/teams", json={"name": "X", "sales_motion": "midmarket"})

        assert response.status_code == 422

    def test_get_playbook(self, test_client: TestClient, authenticated) -> None:
        service = MagicMock()
        service.get_playbook = AsyncMock(return_value=Playbook(sales_motion="smb", tone_default="warm"))
        override(get_team_service, service)

        response = test_client.get("/api/v1/teams/playbook")

        assert response.json()["playbook"]["tone_default"] == "warm"


class TestPublicEndpoints:
    def test_root(self, test_client: TestClient) -> None:
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/health"

    @pytest.mark.parametrize("db_status,expected", [("healthy", "healthy"), ("unhealthy", "degraded")])
    def test_health(self, test_client: TestClient, monkeypatch, db_status, expected) -> None:
        db_client = MagicMock()
        db_client.health_check = AsyncMock(return_value={"status": db_status})
        monkeypatch.setattr(app.state, "db_client", db_client)

        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == expected

    def test_correlation_id_is_echoed(self, test_client: TestClient) -> None:
        response = test_client.get("/", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"
