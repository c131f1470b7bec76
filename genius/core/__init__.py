"""Core app configuration, database and security."""

from genius.core.config import get_settings, settings
from genius.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
