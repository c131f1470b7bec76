"""SQLAlchemy ORM models."""

from genius.models.base import Base
from genius.models.user import User

__all__ = ["Base", "User"]
