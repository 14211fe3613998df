"""
Application configuration using pydantic-settings.
"""
import logging
import secrets
from pathlib import Path
from typing import List, Optional

from pydantic import field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_SQLITE_URL = "sqlite:////data/readstash.db"

# Define the project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent.resolve()


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Readstash Export Worker"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Public web client, used to build links back to saved items
    client_url: str = "http://localhost:3000"

    # Database Configuration
    # Primary database URL (defaults to SQLite)
    database_url: str = DEFAULT_SQLITE_URL

    # PostgreSQL override (optional - for advanced users)
    postgres_url: Optional[str] = None

    # Individual PostgreSQL components (optional - used in Docker)
    postgres_user: Optional[str] = None
    postgres_password: Optional[str] = None
    postgres_db: Optional[str] = None
    postgres_host: Optional[str] = None
    postgres_port: Optional[int] = None

    # Security
    secret_key: str = ""  # Must be set via environment variable

    # Redis Configuration (for Celery)
    redis_url: Optional[str] = None  # e.g., "redis://localhost:6379/0"

    # Celery Configuration
    celery_broker_url: Optional[str] = None  # e.g., "redis://localhost:6379/0"
    celery_result_backend: Optional[str] = None  # e.g., "redis://localhost:6379/0"
    celery_task_serializer: str = "json"
    celery_result_serializer: str = "json"
    celery_accept_content: List[str] = ["json"]
    celery_timezone: str = "UTC"
    celery_enable_utc: bool = True

    # Export integrations
    readwise_api_url: str = "https://readwise.io/api/v2"
    pocket_api_url: str = "https://getpocket.com/v3"
    pocket_consumer_key: Optional[str] = None
    integration_http_timeout: float = 5.0

    # Logging
    log_level: str = "INFO"
    log_dir: str = "/data/logs"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def database_type(self) -> str:
        """Detect database type from configuration."""
        # Check if PostgreSQL override is configured
        if self.postgres_url or (self.postgres_host and self.postgres_user):
            return "postgresql"

        # Check if primary database URL is PostgreSQL
        if self.database_url.startswith(("postgresql", "postgres")):
            return "postgresql"

        # Default to SQLite
        return "sqlite"

    @property
    def effective_database_url(self) -> str:
        """Get the effective database URL based on configuration hierarchy."""
        # Priority 1: Explicit PostgreSQL URL
        if self.postgres_url:
            return self.postgres_url

        # Priority 2: PostgreSQL components (Docker environment)
        if self.postgres_host and self.postgres_user and self.postgres_db:
            password = self.postgres_password or ""
            port = self.postgres_port or 5432
            return f"postgresql://{self.postgres_user}:{password}@{self.postgres_host}:{port}/{self.postgres_db}"

        # Priority 3: Primary database URL (defaults to SQLite)
        return self.database_url

    @field_validator('secret_key')
    @classmethod
    def validate_secret_key(cls, v: str, info: ValidationInfo) -> str:
        """Validate SECRET_KEY is set and long enough."""
        if not v:
            env = info.data.get('environment', 'development')
            if env == 'production':
                raise ValueError(
                    "SECRET_KEY must be set in production! "
                    "Integration tokens cannot be decrypted without it."
                )
            logger.warning(
                "SECRET_KEY not set! Using auto-generated key for development. "
                "Stored integration tokens will not decrypt after a restart."
            )
            return secrets.token_urlsafe(32)

        if len(v) < 32:
            logger.warning(
                f"SECRET_KEY is only {len(v)} characters long. "
                "Recommend at least 32 characters for security."
            )

        return v

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate primary database URL."""
        if not v or not v.strip():
            logger.info(
                "DATABASE_URL not provided; defaulting to SQLite at %s", DEFAULT_SQLITE_URL
            )
            return DEFAULT_SQLITE_URL

        url = v.strip()
        if url.startswith(("sqlite", "postgresql", "postgres")):
            return url

        logger.warning(
            "DATABASE_URL uses unsupported or untested dialect '%s'. Proceed with caution.",
            url.split("://", 1)[0]
        )
        return url

    @field_validator('postgres_url')
    @classmethod
    def validate_postgres_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate PostgreSQL override URL."""
        if not v or not v.strip():
            return None

        url = v.strip()
        if not url.startswith(("postgresql", "postgres")):
            raise ValueError(
                "POSTGRES_URL must be a PostgreSQL URL (postgresql:// or postgres://)"
            )
        return url

    @field_validator('readwise_api_url', 'pocket_api_url', 'client_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so paths can be appended directly."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.strip().rstrip("/")

    @field_validator('integration_http_timeout')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate the per-request timeout for integration calls."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        if v > 300:
            raise ValueError("Timeout cannot exceed 300 seconds")
        return v

    @field_validator('celery_broker_url', 'celery_result_backend')
    @classmethod
    def validate_celery_urls(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        """Auto-configure Celery from redis_url if not explicitly set."""
        if v:
            return v

        field_name = info.field_name
        redis_url = info.data.get('redis_url')

        # If redis_url is set, use it as default for Celery
        if redis_url:
            logger.info(
                f"{field_name.upper()} not set. Defaulting to REDIS_URL"
            )
            return redis_url

        return v


# Create settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance."""
    return settings
