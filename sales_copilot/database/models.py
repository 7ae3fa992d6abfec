"""SQLAlchemy models for teams, sales sessions and generated scripts."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, String, Text, TIMESTAMP, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sales_copilot.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Team(Base):
    """Team owning sessions, members and the sales playbook."""

    __tablename__ = "teams"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    owner_id: Mapped[str] = mapped_column(String, nullable=False)

    # Playbook
    sales_motion: Mapped[str | None] = mapped_column(String, nullable=True)  # smb | enterprise
    tone_default: Mapped[str | None] = mapped_column(String, nullable=True)
    no_go_phrases: Mapped[str | None] = mapped_column(Text, nullable=True)
    primary_objections: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    members: Mapped[list["TeamMember"]] = relationship(
        "TeamMember", back_populates="team", cascade="all, delete-orphan"
    )
    sessions: Mapped[list["SalesSession"]] = relationship("SalesSession", back_populates="team")


class TeamMember(Base):
    """Membership of an identity-provider user in a team."""

    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default="member")  # owner | member
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, nullable=False
    )

    team: Mapped["Team"] = relationship("Team", back_populates="members")


class SalesSession(Base):
    """One customer engagement tracked through its lifecycle status."""

    __tablename__ = "sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by: Mapped[str] = mapped_column(String, nullable=False)
    company_name: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default="active"
    )  # active | demo_booked | won | lost
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    team: Mapped["Team"] = relationship("Team", back_populates="sessions")
    scripts: Mapped[list["SalesScript"]] = relationship("SalesScript", back_populates="session")


class SalesScript(Base):
    """One generation result: raw model output plus its parsed sections."""

    __tablename__ = "sales_scripts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    session_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    team_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=True, index=True
    )
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)

    input: Mapped[str] = mapped_column(Text, nullable=False)
    raw_output: Mapped[str] = mapped_column(Text, nullable=False)

    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    opening: Mapped[str] = mapped_column(Text, nullable=False, default="")
    qualifying_questions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    value_framing: Mapped[str] = mapped_column(Text, nullable=False, default="")
    objections: Mapped[str] = mapped_column(Text, nullable=False, default="")
    closing: Mapped[str] = mapped_column(Text, nullable=False, default="")
    coach_tips: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, nullable=False
    )

    session: Mapped["SalesSession | None"] = relationship("SalesSession", back_populates="scripts")
