"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field

ConfigPresence = Literal["Set", "Missing"]


class HealthEnv(BaseModel):
    """Whether the public store configuration values are present."""

    url: ConfigPresence = Field(description="Store URL configured")
    key: ConfigPresence = Field(description="Store anon key configured")


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    message: str = Field(default="Database connection successful")
    count: int = Field(ge=0, description="Number of stored vulnerabilities")
    env: HealthEnv
