from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned for every handled failure."""

    ok: bool = False
    error: str = Field(..., description="Human-readable error message")


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    status: str = Field(default="healthy", examples=["healthy", "degraded"])
    version: str = Field(..., examples=["0.1.0"])
    service: str = Field(..., examples=["Sales Copilot"])


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")
