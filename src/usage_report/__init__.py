"""Usage and billing reports for the OpenAI and Anthropic cost APIs."""

from usage_report.aggregator import aggregate_costs, daily_totals, rank_line_items
from usage_report.config import (
    ClaudeReportConfig,
    OpenAIReportConfig,
    ReportConfig,
    Settings,
    get_settings,
    load_config,
)
from usage_report.dates import parse_date, to_unix_seconds, validate_date_range
from usage_report.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DateRangeError,
    DateValidationError,
    InvalidDateError,
    InvalidDateFormatError,
    InvalidProviderError,
    ProviderAPIError,
    ReportFormatError,
    ReportPostError,
    UsageReportError,
)
from usage_report.models import (
    AggregatedCosts,
    CostAmount,
    CostBucket,
    CostResult,
    DailyCost,
    LineItemCost,
    Provider,
)
from usage_report.pipeline import ReportRun, run_report
from usage_report.providers import ClaudeCostsClient, OpenAICostsClient, fetch_costs
from usage_report.reports import (
    build_json_report,
    csv_rows_from_json_report,
    generate_csv_report,
    generate_json_report,
    generate_markdown_report,
)
from usage_report.writer import ReportPaths, post_json_report, write_reports

__all__ = [
    "AggregatedCosts",
    "AuthenticationError",
    "ClaudeCostsClient",
    "ClaudeReportConfig",
    "ConfigurationError",
    "CostAmount",
    "CostBucket",
    "CostResult",
    "DailyCost",
    "DateRangeError",
    "DateValidationError",
    "InvalidDateError",
    "InvalidDateFormatError",
    "InvalidProviderError",
    "LineItemCost",
    "OpenAICostsClient",
    "OpenAIReportConfig",
    "Provider",
    "ProviderAPIError",
    "ReportConfig",
    "ReportFormatError",
    "ReportPaths",
    "ReportPostError",
    "ReportRun",
    "Settings",
    "UsageReportError",
    "aggregate_costs",
    "build_json_report",
    "csv_rows_from_json_report",
    "daily_totals",
    "fetch_costs",
    "generate_csv_report",
    "generate_json_report",
    "generate_markdown_report",
    "get_settings",
    "load_config",
    "parse_date",
    "post_json_report",
    "rank_line_items",
    "run_report",
    "to_unix_seconds",
    "validate_date_range",
    "write_reports",
]
