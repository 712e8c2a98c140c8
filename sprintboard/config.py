"""
Configuration Management

This module loads environment variables from .env file and provides
a centralized Settings object for the entire application.

Usage:
    from sprintboard.config import settings

    print(settings.github_api_url)
    print(settings.page_size)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All values are read from .env file or environment variables.
    The GitHub token is optional here: requests normally carry their own
    bearer token, the configured one is only a fallback.
    """

    # GitHub API Configuration
    github_token: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    github_graphql_url: str = "https://api.github.com/graphql"
    request_timeout: float = 30.0  # seconds per upstream request

    # Pagination
    page_size: int = 100  # GitHub max for both REST and GraphQL
    max_pages: int = 100  # hard stop for every paging loop

    # Backlog statistics
    backlog_window_days: int = 30
    backlog_label: str = "YakShaver"

    # Backend API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra fields in .env
    )


# Create a single instance to use throughout the application
settings = Settings()


def validate_settings():
    """Validate that the configured values are usable."""
    errors = []

    if settings.page_size < 1 or settings.page_size > 100:
        errors.append("PAGE_SIZE must be between 1 and 100")

    if settings.max_pages < 1:
        errors.append("MAX_PAGES must be at least 1")

    if settings.backlog_window_days < 1:
        errors.append("BACKLOG_WINDOW_DAYS must be at least 1")

    if errors:
        error_msg = "\n".join(errors)
        raise ValueError(
            f"Configuration errors:\n{error_msg}\n\n"
            f"Please update your .env file.\n"
            f"See .env.example for reference."
        )


if __name__ == "__main__":
    # Test configuration when run directly
    print("Configuration loaded successfully!")
    print(f"GitHub Token: {'configured' if settings.github_token else 'not set'}")
    print(f"GitHub API: {settings.github_api_url}")
    print(f"Page size: {settings.page_size} (max {settings.max_pages} pages)")
    print(f"Backlog window: {settings.backlog_window_days} days, label '{settings.backlog_label}'")
    print(f"API: {settings.api_host}:{settings.api_port}")
