"""Shared route dependencies: bearer token resolution for protected endpoints."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from genius.core.config import Settings, get_settings
from genius.core.database import get_db
from genius.models.user import User
from genius.services.accounts import AccountError, resolve_token

security = HTTPBearer(auto_error=False)

NO_TOKEN = "No token provided"


def authenticate(
    credentials: HTTPAuthorizationCredentials | None,
    db: Session,
    settings: Settings,
) -> User:
    """Resolve Bearer credentials to a user or raise 401."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NO_TOKEN,
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return resolve_token(db, settings, credentials.credentials)
    except AccountError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """Dependency: require a valid Bearer token for an existing user."""
    return authenticate(credentials, db, settings)


def require_db_access(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User | None:
    """Dependency for /api/db: a valid token unless DB_API_REQUIRE_AUTH is disabled."""
    if not settings.DB_API_REQUIRE_AUTH:
        return None
    return authenticate(credentials, db, settings)
