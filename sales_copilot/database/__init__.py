"""Database module for SQLAlchemy models."""

from sales_copilot.database.models import SalesScript, SalesSession, Team, TeamMember

__all__ = [
    "SalesScript",
    "SalesSession",
    "Team",
    "TeamMember",
]
