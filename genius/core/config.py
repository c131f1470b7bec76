"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

# Placeholder accepted in dev only; prod must provide a real secret.
DEV_JWT_SECRET = "dev-only-secret-change-me-before-deploying"

# 7 days
DEFAULT_TOKEN_EXPIRE_SECONDS = 7 * 24 * 60 * 60


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False

    # HTTP listener
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Postgres: either a full DATABASE_URL or the individual DB_* parts
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "postgres"
    DB_USER: str = "postgres"
    DB_PASS: SecretStr = SecretStr("")
    DB_POOL_SIZE: int = 5

    # Bearer tokens (HS256)
    JWT_SECRET: SecretStr = SecretStr(DEV_JWT_SECRET)
    TOKEN_EXPIRE_SECONDS: int = DEFAULT_TOKEN_EXPIRE_SECONDS
    # When False, /api/db accepts requests without a bearer token.
    DB_API_REQUIRE_AUTH: bool = True

    # OpenAI-compatible chat completion endpoint (optional; needed only for /api/chat)
    CHAT_COMPLETIONS_URL: str | None = None
    CHAT_API_KEY: SecretStr | None = None
    CHAT_MODEL: str = "anima-qwen"
    CHAT_MAX_TOKENS: int = 1024
    CHAT_REQUEST_TIMEOUT_SEC: float = 60.0

    # Prebuilt client bundle served as a single-page app
    STATIC_DIR: str = "dist"

    @field_validator("PORT", "DB_PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("Ports must be between 1 and 65535")
        return v

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL (e.g. postgresql:// or postgresql+psycopg2://)"
            )
        # SQLAlchemy only knows the "postgresql" dialect name.
        if v.startswith("postgres://") or v.startswith("postgres+"):
            v = "postgresql" + v[len("postgres"):]
        return v

    @field_validator("DB_HOST", "DB_NAME", "DB_USER")
    @classmethod
    def validate_db_part(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DB_HOST, DB_NAME and DB_USER must be non-empty")
        return v.strip()

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        if v < 1 or v > 100:
            raise ValueError("DB_POOL_SIZE must be between 1 and 100")
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("TOKEN_EXPIRE_SECONDS")
    @classmethod
    def validate_token_expire_seconds(cls, v: int) -> int:
        if v < 60 or v > 30 * 24 * 60 * 60:
            raise ValueError(
                "TOKEN_EXPIRE_SECONDS must be between 60 and 2592000 (1 min to 30 days)"
            )
        return v

    @field_validator("CHAT_COMPLETIONS_URL")
    @classmethod
    def validate_chat_url(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        s = v.strip().lower()
        if not (s.startswith("http://") or s.startswith("https://")):
            raise ValueError(
                "CHAT_COMPLETIONS_URL must use http or https (e.g. http://localhost:8000/v1/chat/completions)"
            )
        return v.strip()

    @field_validator("CHAT_MAX_TOKENS")
    @classmethod
    def validate_chat_max_tokens(cls, v: int) -> int:
        if v < 1 or v > 32768:
            raise ValueError("CHAT_MAX_TOKENS must be between 1 and 32768")
        return v

    @field_validator("CHAT_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_chat_timeout(cls, v: float) -> float:
        if v <= 0 or v > 300:
            raise ValueError(
                "CHAT_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 300"
            )
        return v

    @model_validator(mode="after")
    def reject_dev_secret_in_prod(self) -> "Settings":
        if self.APP_ENV == "prod" and self.JWT_SECRET.get_secret_value() == DEV_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set to a real secret when APP_ENV=prod")
        return self

    @property
    def database_url(self) -> URL:
        """SQLAlchemy URL: DATABASE_URL when set, otherwise built from DB_* parts."""
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL)
        return URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASS.get_secret_value() or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
