"""Configuration settings for GitHub Org Mirror."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncConfig(BaseModel):
    """Configuration for the organization sync pipeline.

    Controls page sizes, pacing between requests, rate limit backoff
    and the volume caps applied to members and curated repositories.
    """

    # Pagination
    per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Items requested per page (GitHub maximum is 100)",
    )

    # Pacing
    page_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Pause between consecutive pages of a stage",
    )
    history_page_delay_ms: int = Field(
        default=500,
        ge=0,
        description="Pause between consecutive issue timeline pages",
    )
    rate_limit_backoff_seconds: float = Field(
        default=60.0,
        ge=0.0,
        description="Fixed pause after a 403 response before the single retry",
    )

    # Volume caps
    member_cap: int = Field(
        default=20,
        ge=0,
        description="Maximum organization users stored per organization",
    )
    extra_pr_cap: int = Field(
        default=2000,
        ge=0,
        description="Total PRs fetched across all curated repositories",
    )
    extra_issue_cap: int = Field(
        default=600,
        ge=0,
        description="Total issues fetched across all curated repositories",
    )
    extra_repos: list[str] = Field(
        default_factory=lambda: [
            "facebook/react",
            "vercel/next.js",
            "microsoft/vscode",
        ],
        description="Curated public repositories mirrored under the OpenSource org",
    )

    # Persistence
    commit_batch_size: int = Field(
        default=50,
        ge=1,
        description="Upserts per database commit (a page is always committed on completion)",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Database
    # --------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./github_mirror.db",
        description="Async database connection string",
    )
    database_echo: bool = Field(
        default=False,
        description="Log every SQL statement (very noisy during a sync)",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )
    github_api_version: str = Field(
        default="2022-11-28",
        description="Value sent in the X-GitHub-Api-Version header",
    )
    github_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="HTTP timeout for a single GitHub request",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Sync Configuration
    # --------------------------------------------------------------------------
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Sync pipeline configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
