"""Authentication dependencies for FastAPI routes.

Resolves the Supabase bearer token into a user and the user into the team it
acts for. Every team-scoped route depends on get_team_context.
"""

from typing import Annotated, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from sales_copilot.core.database import get_async_session
from sales_copilot.core.exceptions import UnauthorizedError
from sales_copilot.core.jwt import JWTVerifier
from sales_copilot.repositories.team_repository import TeamRepository
from sales_copilot.schemas.auth import CurrentUser, TeamContext
from sales_copilot.services.team_service import TeamService
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def get_jwt_verifier(request: Request) -> JWTVerifier:
    return request.app.state.jwt_verifier


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    verifier: Annotated[JWTVerifier, Depends(get_jwt_verifier)],
) -> CurrentUser:
    """Get the current authenticated user from the bearer token.

    Args:
        credentials: HTTP Authorization credentials (automatically injected)
        verifier: Token verifier built at startup

    Returns:
        CurrentUser: Authenticated user information

    Raises:
        UnauthorizedError: If the token is missing, invalid or expired
    """
    if not credentials or not credentials.credentials:
        LOGGER.warning("No authorization credentials provided")
        raise UnauthorizedError()

    try:
        claims = await verifier.verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        raise UnauthorizedError(original_error=e) from e

    user = CurrentUser(id=claims.sub, email=claims.email, role=claims.role or "user")
    LOGGER.debug(f"Authenticated user: {user.id}")
    return user


async def get_team_context(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
) -> TeamContext:
    """Resolve the caller's team.

    Raises:
        NoTeamMembershipError: If the user belongs to no team
    """
    service = TeamService(TeamRepository(db_session))
    return await service.resolve_context(user.id)
