"""Report rendering.

Markdown, CSV and JSON renderers are pure functions of an ``AggregatedCosts``.
Given the same input they produce the same text; the only exception is the
Markdown "Generated" line, which callers can pin with ``generated_at``.
"""

import json
import math
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any

from usage_report.aggregator import daily_totals, rank_line_items, top_line_items
from usage_report.dates import format_report_date
from usage_report.exceptions import ReportFormatError
from usage_report.models import AggregatedCosts, Provider

CSV_HEADER = "date,line_item,cost_usd,project_id"
NO_USAGE_LINE = "No usage data for this period."
MIN_CSV_ROW_COST = 0.01


def _as_provider(provider: Provider | str) -> Provider:
    return provider if isinstance(provider, Provider) else Provider(provider)


def _iso_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _format_fixed(value: float, places: int = 2) -> str:
    """Fixed-point text with ties rounded away from zero.

    Rounds the exact binary value of ``value``, so 0.125 gives ``"0.13"`` where
    ``f"{0.125:.2f}"`` gives ``"0.12"``.
    """
    if value == 0:
        value = 0.0
    exponent = Decimal(10) ** -places
    return str(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


def generate_markdown_report(
    aggregated: AggregatedCosts,
    org_id: str,
    provider: Provider | str,
    generated_at: datetime | None = None,
) -> str:
    """Render the Markdown usage report.

    Args:
        aggregated: Aggregated costs for the run.
        org_id: Organization identifier shown in the header.
        provider: Selects the report title.
        generated_at: Timestamp for the "Generated" line (defaults to now).

    Returns:
        Markdown text.
    """
    provider = _as_provider(provider)
    generated = _iso_timestamp(generated_at or datetime.now(UTC))
    start_formatted = format_report_date(aggregated.start_date, include_year=False)
    end_formatted = format_report_date(aggregated.end_date, include_year=True)

    lines = [
        f"# {provider.title}",
        "",
        f"**Billing Period:** {start_formatted} - {end_formatted}",
        f"**Project ID:** {aggregated.project_id}",
        f"**Organization:** {org_id}",
        f"**Generated:** {generated}",
        "",
        "## Summary",
        "",
        f"- **Total Cost:** ${_format_fixed(aggregated.total_cost)} USD",
        f"- **Billing Days:** {aggregated.billing_days} days",
        f"- **Average Daily Cost:** ${_format_fixed(aggregated.average_daily_cost)} USD",
        "",
    ]

    if not aggregated.has_usage:
        lines.append(NO_USAGE_LINE)
        lines.append("")
        return "\n".join(lines)

    lines.extend(
        [
            "## Cost by Model/Service",
            "",
            "| Model/Service | Total Cost | % of Total |",
            "|---------------|-----------|------------|",
        ]
    )
    for item in rank_line_items(aggregated):
        cost = _format_fixed(item.cost)
        percentage = _format_fixed(item.percentage, 1)
        lines.append(f"| {item.line_item} | ${cost} | {percentage}% |")
    lines.append("")

    lines.extend(
        [
            "## Daily Usage Breakdown",
            "",
            "| Date | Model/Service | Cost (USD) |",
            "|------|---------------|-----------|",
        ]
    )
    for daily in aggregated.daily_costs:
        lines.append(f"| {daily.date} | {daily.line_item} | ${_format_fixed(daily.cost)} |")
    lines.append("")

    lines.extend(
        [
            "## Total by Day",
            "",
            "| Date | Total Cost |",
            "|------|-----------|",
        ]
    )
    for date, total in daily_totals(aggregated):
        lines.append(f"| {date} | ${_format_fixed(total)} |")
    lines.append("")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def escape_csv(value: str) -> str:
    """Quote a field only if it contains a comma, a double quote or a newline."""
    if "," in value or '"' in value or "\n" in value:
        escaped = value.replace('"', '""')
        return f'"{escaped}"'
    return value


def generate_csv_report(aggregated: AggregatedCosts) -> str:
    """Render daily costs as CSV sorted by date, then line item."""
    rows = sorted(aggregated.daily_costs, key=lambda d: (d.date, d.line_item))
    lines = [CSV_HEADER]
    for daily in rows:
        cost = _format_fixed(daily.cost)
        lines.append(f"{daily.date},{escape_csv(daily.line_item)},{cost},{aggregated.project_id}")
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def build_json_report(
    aggregated: AggregatedCosts,
    org_id: str,
    provider: Provider | str,
) -> dict[str, Any]:
    """Build the structured JSON report.

    Costs are raw floats. Line-item percentages are rounded to the nearest
    integer (halves round up) and are 0 when the total is 0.
    """
    provider = _as_provider(provider)
    return {
        "metadata": {
            "provider": provider.value,
            "projectId": aggregated.project_id,
            "organizationId": org_id,
            "billingPeriod": {
                "startDate": aggregated.start_date,
                "endDate": aggregated.end_date,
            },
        },
        "summary": {
            "totalCost": aggregated.total_cost,
            "billingDays": aggregated.billing_days,
            "averageDailyCost": aggregated.average_daily_cost,
        },
        "costsByLineItem": [
            {
                "lineItem": item.line_item,
                "cost": item.cost,
                "percentage": _round_half_up(item.percentage),
            }
            for item in rank_line_items(aggregated)
        ],
        "dailyBreakdown": [daily.to_dict() for daily in aggregated.daily_costs],
        "dailyTotals": [
            {"date": date, "total": total} for date, total in daily_totals(aggregated)
        ],
    }


def generate_json_report(
    aggregated: AggregatedCosts,
    org_id: str,
    provider: Provider | str,
) -> str:
    """Render the JSON report as indented text with a trailing newline."""
    report = build_json_report(aggregated, org_id, provider)
    return json.dumps(report, indent=2, ensure_ascii=False) + "\n"


def csv_rows_from_json_report(report: dict[str, Any]) -> list[dict[str, Any]]:
    """Flatten a JSON report's daily breakdown into CSV-shaped rows.

    Rows with a cost of zero or less are dropped and costs below one cent are
    raised to ``0.01`` so every exported row is billable.

    Raises:
        ReportFormatError: ``dailyBreakdown`` or ``metadata.projectId`` is missing.
    """
    breakdown = report.get("dailyBreakdown")
    if breakdown is None:
        raise ReportFormatError("Invalid report format: missing dailyBreakdown array")
    project_id = (report.get("metadata") or {}).get("projectId")
    if not project_id:
        raise ReportFormatError("Invalid report format: missing metadata.projectId")

    rows = []
    for daily in breakdown:
        cost = float(daily["cost"])
        if cost <= 0:
            continue
        cost = max(cost, MIN_CSV_ROW_COST)
        rows.append(
            {
                "date": daily["date"],
                "line_item": daily["lineItem"],
                "cost_usd": float(_format_fixed(cost)),
                "project_id": project_id,
            }
        )
    rows.sort(key=lambda r: (r["date"], r["line_item"]))
    return rows


# ---------------------------------------------------------------------------
# Terminal
# ---------------------------------------------------------------------------


def format_terminal_summary(
    aggregated: AggregatedCosts,
    provider: Provider | str,
    paths: list[Path] | None = None,
) -> str:
    """Plain-text run summary printed by the CLI."""
    provider = _as_provider(provider)
    lines = [
        provider.title,
        "=" * len(provider.title),
        f"Period: {aggregated.start_date} to {aggregated.end_date}",
        f"Project: {aggregated.project_id}",
        "",
        f"Total Cost: ${_format_fixed(aggregated.total_cost)} USD",
        f"Total Days: {aggregated.billing_days}",
        f"Average Daily Cost: ${_format_fixed(aggregated.average_daily_cost)}",
        "",
    ]

    top = top_line_items(aggregated)
    if top:
        lines.append("Top Models/Services:")
        for item in top:
            lines.append(f"  {item.line_item}: ${_format_fixed(item.cost)}")
        lines.append("")

    if paths:
        lines.append("Reports generated:")
        for path in paths:
            lines.append(f"  - {path}")

    return "\n".join(lines)
