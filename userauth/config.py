"""Application configuration using Pydantic settings."""

from functools import lru_cache
from urllib.parse import urlsplit

from pydantic import field_validator
from pydantic_settings import BaseSettings

_POSTGRES_SCHEMES = {"postgres", "postgresql"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    apply_migrations: bool = True

    # Authentication
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_expire_hours: int = 24

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    @field_validator("database_url")
    @classmethod
    def database_url_is_postgres(cls, v: str) -> str:
        """Reject URLs asyncpg cannot connect with."""
        parts = urlsplit(v)
        if parts.scheme not in _POSTGRES_SCHEMES:
            raise ValueError(
                "database_url must start with postgres:// or postgresql://"
            )
        if not parts.hostname and not parts.path.strip("/"):
            raise ValueError("database_url must name a host or a database")
        return v

    @field_validator("jwt_secret")
    @classmethod
    def jwt_secret_not_empty(cls, v: str) -> str:
        """Ensure a signing secret is actually configured."""
        if not v.strip():
            raise ValueError("jwt_secret cannot be empty")
        return v

    @field_validator("db_pool_max_size")
    @classmethod
    def pool_size_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("db_pool_max_size must be at least 1")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
