"""
Health check schemas.

Dependencies: pydantic
System role: Health API contracts
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    service: str


class ConfigCheckResponse(BaseModel):
    """Readiness of external dependencies."""

    provider: bool = Field(description="Model provider API key configured")
    database: bool = Field(description="Database reachable")
