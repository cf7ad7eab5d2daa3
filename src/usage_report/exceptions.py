"""Exception hierarchy for usage-report.

Validation and configuration errors are raised before any network call.
Transport errors come from the provider clients and are never retried.
"""

from typing import Any


class UsageReportError(Exception):
    """Base exception for all usage-report errors."""


class DateValidationError(UsageReportError, ValueError):
    """A date argument or date range is not acceptable."""


class InvalidDateFormatError(DateValidationError):
    """Date text does not match YYYY-MM-DD."""

    def __init__(self, value: str):
        super().__init__(f"Invalid date format: {value}. Expected YYYY-MM-DD")
        self.value = value


class InvalidDateError(DateValidationError):
    """Date text is well formed but names a day that does not exist."""

    def __init__(self, value: str):
        super().__init__(f"Invalid date: {value}")
        self.value = value


class DateRangeError(DateValidationError):
    """End date is not after the start date."""

    def __init__(self, message: str = "End date must be after start date"):
        super().__init__(message)


class InvalidProviderError(UsageReportError, ValueError):
    """Provider selector is not one of the supported providers."""

    def __init__(self, value: str, valid: list[str]):
        super().__init__(f"Invalid provider: {value}. Use one of {', '.join(valid)}.")
        self.value = value
        self.valid = valid


class ConfigurationError(UsageReportError):
    """A required credential or identifier is missing."""

    def __init__(self, variable: str):
        super().__init__(f"Missing required environment variable: {variable}")
        self.variable = variable

    @property
    def hint(self) -> str:
        """Remediation hint shown by the CLI."""
        return f"Make sure {self.variable} is set in your environment."


class ProviderAPIError(UsageReportError):
    """A vendor cost API request failed."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response = response or {}


class AuthenticationError(ProviderAPIError):
    """The vendor rejected the admin key (401/403)."""

    pass


class ReportPostError(UsageReportError):
    """Posting the JSON report to the destination URL failed."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ReportFormatError(UsageReportError):
    """A JSON report is missing a required section."""

    pass
