"""Response schema for GET /api/health."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus database reachability, in the same success envelope as the other endpoints."""

    success: bool = True
    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of SELECT 1 on a pooled connection",
    )
