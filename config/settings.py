"""
Application configuration settings.

Centralized configuration using Pydantic Settings for type safety and validation.
Loaded once at import time; every component reads from the module-level
``settings`` instance and never mutates it.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "book-network-auth"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8088
    api_reload: bool = False

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "book_network"
    database_user: str = "postgres"
    database_password: str = "postgres"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0

    # Celery
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/0"
    celery_task_serializer: str = "json"
    celery_result_serializer: str = "json"
    celery_accept_content: list[str] = ["json"]
    celery_timezone: str = "UTC"
    celery_enable_utc: bool = True
    celery_task_acks_late: bool = True
    celery_task_reject_on_worker_lost: bool = True
    celery_worker_prefetch_multiplier: int = 4
    celery_worker_max_tasks_per_child: int = 1000
    celery_result_expires: int = 3600

    # Token signing
    # For RS*/ES* algorithms jwt_secret_key holds the private key (PEM) and
    # jwt_verification_key the matching public key.
    jwt_secret_key: str = "change-this-in-production-to-a-long-random-secret"
    jwt_algorithm: str = "HS256"
    jwt_verification_key: str | None = None
    jwt_expiration_seconds: int = 86400

    # Password hashing
    bcrypt_rounds: int = 12

    # Account activation
    activation_code_length: int = 6
    activation_code_expiry_seconds: int = 600
    activation_url: str = "http://localhost:4200/activate-account"
    # Validated and long-expired codes are purged after this window
    activation_code_retention_seconds: int = 86400
    activation_code_purge_interval_seconds: int = 3600

    # Roles inserted at schema initialization
    default_role: str = "USER"
    seed_roles: list[str] = ["USER"]

    # Request paths that bypass bearer-token authentication (prefix match)
    public_paths: list[str] = ["/auth", "/docs", "/redoc", "/openapi.json", "/health"]

    # Email Service (SMTP)
    smtp_host: str = "mailhog"
    smtp_port: int = 1025
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_from_email: str = "noreply@booknetwork.local"
    smtp_use_tls: bool = False

    # Feature Flags
    enable_metrics: bool = True


# Global settings instance
settings = Settings()
