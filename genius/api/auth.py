"""Auth endpoint: signup, login, and token verification dispatched on the action field."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from genius.api.deps import authenticate, security
from genius.core.config import Settings, get_settings
from genius.core.database import get_db
from genius.schemas.auth import AuthRequest, AuthResponse, PublicUser
from genius.services import accounts
from genius.services.accounts import AccountError

logger = logging.getLogger(__name__)

router = APIRouter()

AuthHandler = Callable[
    [AuthRequest, Session, Settings, HTTPAuthorizationCredentials | None],
    AuthResponse,
]


def _signup(
    body: AuthRequest,
    db: Session,
    settings: Settings,
    credentials: HTTPAuthorizationCredentials | None,
) -> AuthResponse:
    user, token = accounts.signup(db, settings, body.email, body.username, body.password)
    return AuthResponse(user=PublicUser.model_validate(user), token=token)


def _login(
    body: AuthRequest,
    db: Session,
    settings: Settings,
    credentials: HTTPAuthorizationCredentials | None,
) -> AuthResponse:
    user, token = accounts.login(db, settings, body.username, body.password)
    return AuthResponse(user=PublicUser.model_validate(user), token=token)


def _verify(
    body: AuthRequest,
    db: Session,
    settings: Settings,
    credentials: HTTPAuthorizationCredentials | None,
) -> AuthResponse:
    user = authenticate(credentials, db, settings)
    return AuthResponse(user=PublicUser.model_validate(user))


ACTION_HANDLERS: dict[str, AuthHandler] = {
    "signup": _signup,
    "login": _login,
    "verify": _verify,
}


@router.post("", response_model=AuthResponse, response_model_exclude_none=True)
def post_auth(
    body: AuthRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthResponse:
    """
    Dispatch on body.action:

    - signup: email, username, password -> user and token
    - login: username, password -> user and token
    - verify: Authorization: Bearer <token> -> user
    """
    handler = ACTION_HANDLERS.get(body.action or "")
    if handler is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown action: {body.action}",
        )
    try:
        return handler(body, db, settings, credentials)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Auth error: action=%s", body.action)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Internal server error",
        ) from e
