"""Request/response schemas for the auth endpoint."""

from typing import Literal, get_args

from pydantic import BaseModel, Field

# Actions accepted by POST /api/auth.
AuthAction = Literal["signup", "login", "verify"]

AUTH_ACTIONS: frozenset[str] = frozenset(get_args(AuthAction))


class AuthRequest(BaseModel):
    """Action descriptor for signup, login, or verify. Required fields depend on the action."""

    model_config = {"extra": "ignore"}

    action: str | None = Field(default=None, description="signup, login, or verify")
    email: str | None = Field(default=None, max_length=255, description="Email (signup)")
    username: str | None = Field(default=None, max_length=255, description="Username (signup, login)")
    password: str | None = Field(default=None, max_length=1024, description="Password (signup, login)")


class PublicUser(BaseModel):
    """User identity returned to clients (no password hash)."""

    id: int
    email: str
    username: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Successful auth result; token is omitted for verify."""

    success: bool = True
    user: PublicUser
    token: str | None = Field(default=None, description="Bearer token (signup, login)")
