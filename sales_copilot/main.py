"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sales_copilot.api.v1.endpoints import health
from sales_copilot.api.v1.router import api_router
from sales_copilot.core.config import Settings, settings
from sales_copilot.core.database import DatabaseClient, close_database, init_database
from sales_copilot.core.exceptions import AppError
from sales_copilot.core.jwt import JWTVerifier
from sales_copilot.core.llm_client import ChatCompletionClient
from sales_copilot.schemas.common import ErrorResponse, RootResponse
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_settings: Settings = app.state.settings

    # Startup
    LOGGER.info("Validating configuration...")
    if not app_settings.llm.api_key:
        LOGGER.error("LLM_API_KEY is missing")
    if not app_settings.supabase.url:
        LOGGER.error("SUPABASE_URL is missing")

    LOGGER.info(
        "Starting application",
        extra={
            "app_name": app_settings.app_name,
            "version": app_settings.app_version,
            "environment": app_settings.environment,
        },
    )

    LOGGER.info("Starting database initialization...")
    try:
        await asyncio.wait_for(
            init_database(app.state.db_client, auto_migrate=app_settings.db.auto_migrate),
            timeout=app_settings.db.init_timeout,
        )
        LOGGER.info("Database initialized successfully")
    except asyncio.TimeoutError:
        LOGGER.error(f"Database initialization timed out after {app_settings.db.init_timeout}s")
    except Exception as e:
        LOGGER.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    LOGGER.info("Shutting down application")
    await close_database(app.state.db_client)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        LOGGER.error(
            f"{type(exc).__name__}: {exc.message}",
            exc_info=exc.original_error,
            extra={"path": request.url.path},
        )
    else:
        LOGGER.info(
            f"{type(exc).__name__}: {exc.message}",
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.error(
        "Unhandled error",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal server error").model_dump(),
    )


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the application and its process-level clients.

    Args:
        app_settings: Settings to build the database, completion and JWT clients from

    Returns:
        FastAPI: Configured application
    """
    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="Sales-script copilot for B2B sales teams",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.db_client = DatabaseClient.from_settings(app_settings.db)
    app.state.llm_client = ChatCompletionClient.from_settings(app_settings.llm)
    app.state.jwt_verifier = JWTVerifier.from_settings(app_settings.supabase)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Correlation ID middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
        request.state.correlation_id = correlation_id
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response

    # CORS middleware - added last to wrap all other middleware/responses
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )

    app.include_router(api_router, prefix=app_settings.api_v1_prefix)
    app.include_router(health.router, prefix="/health", tags=["Health"])

    @app.get(
        "/",
        response_model=RootResponse,
        tags=["Root"],
        summary="Root endpoint",
        description="Get basic information about the API",
        operation_id="get_public_root_metadata",
    )
    async def root() -> RootResponse:
        """Root endpoint.

        Returns:
            RootResponse: Basic API information
        """
        return RootResponse(
            message="Server is running",
            version=app_settings.app_version,
            docs="/docs",
            health="/health",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sales_copilot.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
