"""Pydantic schema for the health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Service status plus reachability of the user directory."""

    status: Literal["ok"] = "ok"
    version: str
    environment: Literal["dev", "prod"]
    database: Literal["connected", "disconnected"] = Field(
        description="Whether the user directory answered a trivial query"
    )
