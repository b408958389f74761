"""
Application Configuration Module.

Manages application settings and environment variables using Pydantic for validation.
Provides centralized configuration management with type safety and validation.

Features:
- Environment variable loading and validation
- Secure credential management
- Reporting month validation
- Path normalization for output directories
"""

import os
import re
from typing import List

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logger import LogManager
from miners.models import RepositoryRef, TimeWindow

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class Settings(BaseSettings):
    """
    Application configuration settings with validation.

    Attributes:
        app_name (str): Name of the application, also the logger name
        dev (bool): Development mode flag, switches to readable console logs
        log_dir (str): Directory for log files
        log_level (int): Logging level (default: info)
        github_token (SecretStr): GitHub API authentication token
        repos (str): Comma-separated list of ``owner/name`` repositories
        month (str): Reporting month in ``YYYY-MM`` format
        output_basename (str): Prefix for generated report files
        report_output_dir (str): Directory for generated reports
        graphql_url (str): GitHub GraphQL endpoint
        page_size (int): Number of nodes requested per page
        request_timeout (float): Per request timeout in seconds
        default_retry_after (int): Wait used when a rate limited response has no hint
        max_rate_limit_retries (int): Rate limit retries before giving up
        pdf_report (bool): Whether to render the PDF report
    """

    # Application settings
    app_name: str = Field(default="ghstats", description="Application name")
    dev: bool = Field(default=False, description="Debug mode")
    log_dir: str = Field(default="logs", description="Logging directory")
    log_level: int = Field(default=20, description="Logging level, default info")

    # GitHub configuration
    github_token: SecretStr = Field(..., description="GitHub token")
    repos: str = Field(
        ..., description="Comma-separated list of owner/name repositories"
    )
    graphql_url: str = Field(
        default="https://api.github.com/graphql", description="GraphQL endpoint"
    )
    page_size: int = Field(default=50, gt=0, le=100, description="Nodes per page")
    request_timeout: float = Field(
        default=30.0, gt=0, description="Request timeout in seconds"
    )
    default_retry_after: int = Field(
        default=60, ge=0, description="Fallback rate limit wait in seconds"
    )
    max_rate_limit_retries: int = Field(
        default=100, ge=0, description="Rate limit retries before aborting"
    )

    # Reporting configuration
    month: str = Field(..., description="Reporting month, YYYY-MM")
    output_basename: str = Field(
        default="github-stats", description="Report file name prefix"
    )
    report_output_dir: str = Field(
        default="reports", description="Report output directory"
    )
    pdf_report: bool = Field(default=True, description="Render the PDF report")

    @property
    def repositories(self) -> List[RepositoryRef]:
        """
        Get the list of repositories from configuration.

        Returns:
            List[RepositoryRef]: Parsed repositories, in configured order
        """
        return [
            RepositoryRef.parse(repo) for repo in self.repos.split(",") if repo.strip()
        ]

    @property
    def window(self) -> TimeWindow:
        """Collection window for the configured month."""
        return TimeWindow.from_month(self.month)

    @field_validator("month")
    def validate_month(cls, v: str) -> str:
        """
        Ensure the month is given as YYYY-MM.

        Args:
            v (str): Month string to validate

        Returns:
            str: The stripped month string

        Raises:
            ValueError: If the month is malformed
        """
        v = v.strip()
        if not MONTH_PATTERN.match(v):
            raise ValueError("month must use the YYYY-MM format")
        return v

    @field_validator("repos")
    def validate_repos(cls, v: str) -> str:
        """Reject an empty repository list."""
        if not [repo for repo in v.split(",") if repo.strip()]:
            raise ValueError("at least one repository is required")
        return v

    @field_validator("report_output_dir")
    def ensure_absolute_path(cls, v: str) -> str:
        """
        Ensure report directory path is absolute.

        Args:
            v (str): Directory path to validate

        Returns:
            str: Absolute path to report directory
        """
        if not os.path.isabs(v):
            return os.path.abspath(v)
        return v

    # Configure env file loading
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )


# Create global settings instance
settings = Settings()

# Initialize logging configuration
logger = LogManager(
    app_name=settings.app_name.lower(),
    log_dir=settings.log_dir,
    development=settings.dev,
    level=settings.log_level,
).logger
