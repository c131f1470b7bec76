"""Health check endpoint with database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from genius.core.config import Settings, get_settings
from genius.core.database import check_db_connected, get_db
from genius.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Always 200; the database field reports whether SELECT 1 succeeded."""
    database = "connected" if check_db_connected(db) else "disconnected"
    return HealthResponse(environment=settings.APP_ENV, database=database)
