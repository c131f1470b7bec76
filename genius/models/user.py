"""ORM model for application users (credential store)."""

from sqlalchemy import JSON, BigInteger, Column, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB

from genius.models.base import Base


class User(Base):
    """
    User account for password login and bearer-token authentication.

    password_hash: "hex(salt):hex(pbkdf2 key)"
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    last_login = Column(DateTime(timezone=True), nullable=True)
    preferences = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    storage_used_bytes = Column(BigInteger().with_variant(Integer(), "sqlite"), nullable=False, default=0)
