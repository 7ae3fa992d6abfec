from fastapi import APIRouter

from sales_copilot.api.v1.endpoints import generate, scripts, sessions, teams

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(generate.router, prefix="/generate", tags=["Generation"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
api_router.include_router(scripts.router, prefix="/scripts", tags=["Scripts"])
api_router.include_router(teams.router, prefix="/teams", tags=["Teams"])

__all__ = ["api_router"]
