"""
Configuration management using Pydantic Settings.
Supports multiple environments: development, staging, production.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings with environment-based configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "NFT Minting Worker"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Worker
    batch_size: int = 100
    max_retries: int = 3
    retry_delay: int = 5000  # milliseconds
    apply_retry_delay: bool = False
    poll_interval: int = 10000  # milliseconds
    concurrency_limit: int = 10
    empty_poll_threshold: int = 3

    # Database
    database_url: Optional[str] = None
    pgsql_host: str = "localhost"
    pgsql_port: int = 5432
    pgsql_database: str = "postgres"
    pgsql_user: str = "postgres"
    pgsql_password: str = ""
    database_pool_size: int = 10
    database_max_overflow: int = 20

    # Solana
    solana_rpc_url: str = "https://api.devnet.solana.com"
    solana_commitment: str = "confirmed"
    solana_program_id: Optional[str] = None
    solana_admin_cap_id: Optional[str] = None
    solana_admin_private_key: Optional[str] = None
    solana_compute_unit_limit: int = 200_000
    solana_timeout: int = 30  # seconds

    # Dry run
    dry_run_failure_rate: float = 0.1

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # json or console
    log_file: Optional[str] = None

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("json", "console"):
            raise ValueError("Log format must be 'json' or 'console'")
        return v

    @field_validator("batch_size", "max_retries", "concurrency_limit", "empty_poll_threshold")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be a positive integer")
        return v

    @field_validator("retry_delay", "poll_interval")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Delay must not be negative")
        return v

    @field_validator("dry_run_failure_rate")
    @classmethod
    def validate_failure_rate(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("Failure rate must be between 0 and 1")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@dataclass(frozen=True)
class WorkerConfig:
    """
    Immutable worker configuration.

    Built once at startup and handed to every component constructor, so the
    fetcher, executor and recorder never read the environment themselves.
    Delays are stored in seconds.
    """

    batch_size: int = 100
    max_retries: int = 3
    retry_delay: float = 5.0
    apply_retry_delay: bool = False
    poll_interval: float = 10.0
    concurrency_limit: int = 10
    empty_poll_threshold: int = 3

    def __post_init__(self):
        for name in ("batch_size", "max_retries", "concurrency_limit", "empty_poll_threshold"):
            if getattr(self, name) < 1:
                raise ConfigurationError(
                    f"{name} must be a positive integer",
                    {name: getattr(self, name)}
                )
        for name in ("retry_delay", "poll_interval"):
            if getattr(self, name) < 0:
                raise ConfigurationError(
                    f"{name} must not be negative",
                    {name: getattr(self, name)}
                )

    @classmethod
    def from_settings(cls, settings: Settings) -> "WorkerConfig":
        """Build worker config from settings, converting milliseconds to seconds."""
        return cls(
            batch_size=settings.batch_size,
            max_retries=settings.max_retries,
            retry_delay=settings.retry_delay / 1000,
            apply_retry_delay=settings.apply_retry_delay,
            poll_interval=settings.poll_interval / 1000,
            concurrency_limit=settings.concurrency_limit,
            empty_poll_threshold=settings.empty_poll_threshold,
        )


class DatabaseConfig:
    """Database-specific configuration."""

    @staticmethod
    def get_database_url(settings: Settings, async_driver: bool = True) -> str:
        """Get database URL with appropriate driver."""
        url = settings.database_url
        if not url:
            url = (
                f"postgresql://{quote_plus(settings.pgsql_user)}:"
                f"{quote_plus(settings.pgsql_password)}@{settings.pgsql_host}:"
                f"{settings.pgsql_port}/{settings.pgsql_database}"
            )
        if async_driver and url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif not async_driver and url.startswith("postgresql+asyncpg://"):
            return url.replace("postgresql+asyncpg://", "postgresql://", 1)
        return url

    @staticmethod
    def get_engine_config(settings: Settings) -> dict:
        """Get SQLAlchemy engine configuration."""
        return {
            "pool_size": settings.database_pool_size,
            "max_overflow": settings.database_max_overflow,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
        }


class SolanaConfig:
    """Solana-specific configuration and constants."""

    MINT_INSTRUCTION = "mint_card"

    @staticmethod
    def get_rpc_config(settings: Settings) -> dict:
        """Get Solana RPC client configuration."""
        return {
            "endpoint": settings.solana_rpc_url,
            "commitment": settings.solana_commitment,
            "timeout": settings.solana_timeout,
        }
