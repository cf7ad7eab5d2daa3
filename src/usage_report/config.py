"""Configuration management for usage-report."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from usage_report.exceptions import ConfigurationError, InvalidProviderError
from usage_report.models import Provider

# Placeholder identifiers for providers without a project/org concept
DEFAULT_PROJECT_ID = "default"
DEFAULT_ORG_ID = "default"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="",
    )

    # OpenAI (organization costs API requires an admin key)
    openai_admin_key: SecretStr | None = Field(default=None, description="OpenAI admin API key")
    openai_org_id: str | None = Field(default=None, description="OpenAI organization ID")
    openai_project_id: str | None = Field(default=None, description="OpenAI project ID")

    # Anthropic (cost report API requires an admin key)
    anthropic_admin_api_key: SecretStr | None = Field(
        default=None, description="Anthropic admin API key"
    )

    # Output
    reports_dir: str = Field(default=".", description="Root directory for the reports/ tree")
    request_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")

    # Application
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Logging Configuration
    log_to_file: bool = Field(default=False, description="Enable file-based logging")
    log_directory: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10485760,  # 10MB
        description="Max size per log file before rotation",
    )
    log_file_backup_count: int = Field(
        default=5, description="Number of rotated log files to keep"
    )
    log_file_prefix: str = Field(default="usage_report", description="Prefix for log file names")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got: {v}")
        return v.upper()

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError(f"request_timeout must be positive, got: {v}")
        return v

    @property
    def log_file_path(self) -> str:
        """Get the full log file path."""
        return f"{self.log_directory}/{self.log_file_prefix}.log"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class OpenAIReportConfig(BaseModel):
    """Everything needed to pull OpenAI organization costs for one range."""

    provider: Literal["openai"] = "openai"
    start_date: str
    end_date: str
    api_key: SecretStr
    org_id: str
    project_id: str

    @property
    def report_project_id(self) -> str:
        return self.project_id

    @property
    def report_org_id(self) -> str:
        return self.org_id


class ClaudeReportConfig(BaseModel):
    """Everything needed to pull the Anthropic cost report for one range.

    The cost report is organization-scoped, so there is no project or org id.
    """

    provider: Literal["claude"] = "claude"
    start_date: str
    end_date: str
    api_key: SecretStr

    @property
    def report_project_id(self) -> str:
        return DEFAULT_PROJECT_ID

    @property
    def report_org_id(self) -> str:
        return DEFAULT_ORG_ID


ReportConfig = Annotated[
    OpenAIReportConfig | ClaudeReportConfig,
    Field(discriminator="provider"),
]


def parse_provider(value: str) -> Provider:
    """Parse a provider selector string.

    Raises:
        InvalidProviderError: ``value`` is not a supported provider.
    """
    try:
        return Provider(value)
    except ValueError as e:
        raise InvalidProviderError(value, [p.value for p in Provider]) from e


def _require(value: str | None, variable: str) -> str:
    if not value:
        raise ConfigurationError(variable)
    return value


def _secret(value: SecretStr | None) -> str | None:
    return value.get_secret_value() if value is not None else None


def load_config(
    start_date: str,
    end_date: str,
    provider: Provider | str,
    settings: Settings | None = None,
) -> OpenAIReportConfig | ClaudeReportConfig:
    """Build the report config for ``provider`` from settings.

    Args:
        start_date: Report start date (YYYY-MM-DD).
        end_date: Report end date (YYYY-MM-DD).
        provider: Provider enum or selector string.
        settings: Settings to read from (defaults to the cached settings).

    Returns:
        A provider-specific report config.

    Raises:
        ConfigurationError: A required variable is missing or empty.
        InvalidProviderError: ``provider`` is not supported.
    """
    if isinstance(provider, str):
        provider = parse_provider(provider)
    if settings is None:
        settings = get_settings()

    if provider is Provider.OPENAI:
        api_key = _require(_secret(settings.openai_admin_key), "OPENAI_ADMIN_KEY")
        org_id = _require(settings.openai_org_id, "OPENAI_ORG_ID")
        project_id = _require(settings.openai_project_id, "OPENAI_PROJECT_ID")
        return OpenAIReportConfig(
            start_date=start_date,
            end_date=end_date,
            api_key=SecretStr(api_key),
            org_id=org_id,
            project_id=project_id,
        )

    api_key = _require(_secret(settings.anthropic_admin_api_key), "ANTHROPIC_ADMIN_API_KEY")
    return ClaudeReportConfig(start_date=start_date, end_date=end_date, api_key=SecretStr(api_key))
