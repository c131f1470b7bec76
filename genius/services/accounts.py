"""Account operations behind the auth endpoint: signup, login, and token resolution."""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from genius.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from genius.models.user import User

if TYPE_CHECKING:
    from genius.core.config import Settings

logger = logging.getLogger(__name__)

# Same wording for unknown user and wrong password.
INVALID_CREDENTIALS = "Invalid credentials"


class AccountError(Exception):
    """Raised for rejected account operations; carries the HTTP status to report."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def issue_token(user: User, settings: "Settings") -> str:
    """Bearer token embedding the user's id, email, and username."""
    return create_access_token(
        {"user_id": user.id, "email": user.email, "username": user.username},
        settings,
    )


def create_user(db: Session, email: str, username: str, password: str) -> User:
    """
    Insert a new user with a freshly hashed password.

    Raises AccountError("User already exists") if the email or username is taken;
    nothing is inserted in that case.
    """
    existing = (
        db.query(User.id)
        .filter(or_(User.email == email, User.username == username))
        .first()
    )
    if existing is not None:
        raise AccountError("User already exists")

    user = User(
        email=email,
        username=username,
        password_hash=hash_password(password),
        created_at=datetime.now(UTC),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same email/username.
        db.rollback()
        raise AccountError("User already exists") from e
    db.refresh(user)
    logger.info("User signed up: user_id=%s username=%s", user.id, user.username)
    return user


def signup(
    db: Session,
    settings: "Settings",
    email: str | None,
    username: str | None,
    password: str | None,
) -> tuple[User, str]:
    if not email or not username or not password:
        raise AccountError("Email, username, and password are required")
    user = create_user(db, email, username, password)
    return user, issue_token(user, settings)


def login(
    db: Session,
    settings: "Settings",
    username: str | None,
    password: str | None,
) -> tuple[User, str]:
    """Authenticate by username only; on success record last_login and issue a fresh token."""
    if not username or not password:
        raise AccountError("Username and password are required")

    user = db.query(User).filter(User.username == username).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed for username=%s", username)
        raise AccountError(INVALID_CREDENTIALS, status_code=401)

    user.last_login = datetime.now(UTC)
    db.commit()
    db.refresh(user)
    logger.info("User logged in: user_id=%s", user.id)
    return user, issue_token(user, settings)


def resolve_token(db: Session, settings: "Settings", token: str) -> User:
    """
    Verify a bearer token and re-fetch its user from the store.
    Raises AccountError (401) when the token is invalid or the user no longer exists.
    """
    claims = decode_access_token(token, settings)
    if claims is None:
        raise AccountError("Invalid token", status_code=401)
    user_id = claims.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise AccountError("Invalid token", status_code=401)
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AccountError("User not found", status_code=401)
    return user
