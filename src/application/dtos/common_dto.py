"""Common DTOs for API responses and error handling."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""
    detail: str = Field(..., description="Error message describing what went wrong")


class SuccessResponse(BaseModel):
    """Standard success response model."""
    ok: bool = Field(True, description="Indicates the operation was successful")
    message: str | None = Field(None, description="Optional success message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Health status", examples=["healthy"])


class RootResponse(BaseModel):
    """Root endpoint response model."""
    status: str = Field(..., description="API status", examples=["ok"])
    service: str = Field(..., description="Service name", examples=["cookiejar-creator-backend"])
    version: str = Field(..., description="API version", examples=["0.1.0"])


class BlockingScreenResponse(BaseModel):
    """Returned instead of a dashboard page when the page must not render yet."""
    screen: str = Field(..., description="Blocking screen to show", examples=["access-denied"])
    detail: str | None = Field(None, description="Human readable explanation")
    home_url: str | None = Field(None, description="Where the screen's home button leads")
