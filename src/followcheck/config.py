"""Configuration management for followcheck.

Loads GitHub API settings from environment variables using Pydantic.
Tokens belong in .env or the environment (never hardcoded).

Usage:
    from followcheck.config import settings

    print(settings.github_api_url)
    print(settings.per_page)
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """followcheck configuration from environment variables.

    Loads from .env file automatically. Validates on instantiation.
    Nothing is required: unauthenticated GitHub access works, just with
    a much lower quota.

    Attributes:
        github_api_url: Base URL of the GitHub REST API
        github_api_version: Value of the X-GitHub-Api-Version header
        github_token: Optional personal access token (raises the quota ceiling)
        per_page: Page size for follower/following listings
        github_rate_limit: Client-side request pacing (requests/second)
        enrich_concurrency: Max concurrent profile fetches during enrichment
        request_timeout: Per-request deadline in seconds
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars
    )

    # GitHub API
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )
    github_api_version: str = Field(
        default="2022-11-28",
        description="GitHub REST API version header",
    )
    github_token: str | None = Field(
        default=None,
        description="GitHub token (https://github.com/settings/tokens)",
    )

    # Paging
    per_page: int = Field(default=100, ge=1, le=100, description="Items per listing page")

    # Rate Limiting (conservative defaults)
    github_rate_limit: int = Field(default=10, ge=1, description="GitHub requests/second")
    enrich_concurrency: int = Field(
        default=8,
        ge=1,
        le=50,
        description="Max concurrent profile fetches",
    )
    request_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout (s)")

    # System Settings
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("github_token")
    @classmethod
    def validate_github_token(cls, v: str | None) -> str | None:
        """Treat a blank token as no token."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("github_api_url")
    @classmethod
    def validate_github_api_url(cls, v: str) -> str:
        """Ensure the API URL is absolute http(s)."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"github_api_url must start with http:// or https://, got '{v}'")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid:
            raise ValueError(f"log_level must be one of {valid}, got {v}")
        return v_upper


# Global settings instance, loaded once at import
settings = Settings()
