"""Report persistence and delivery.

Reports land in ``<base_dir>/reports/<provider>/`` as
``usage-<start>-to-<end>.{md,csv,json}``. The JSON report can also be posted
to a webhook-style URL.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

from usage_report.exceptions import ReportPostError
from usage_report.logging import get_logger
from usage_report.models import AggregatedCosts, Provider
from usage_report.reports import (
    generate_csv_report,
    generate_json_report,
    generate_markdown_report,
)

log = get_logger("usage_report.writer")

POST_TIMEOUT = 30.0


@dataclass(frozen=True)
class ReportPaths:
    """Files written for one run."""

    markdown: Path
    csv: Path
    json: Path

    def all(self) -> list[Path]:
        return [self.markdown, self.csv, self.json]


def reports_directory(provider: Provider | str, base_dir: str | Path | None = None) -> Path:
    """Return (and create) ``<base_dir>/reports/<provider>``."""
    provider = provider if isinstance(provider, Provider) else Provider(provider)
    root = Path(base_dir) if base_dir is not None else Path.cwd()
    directory = root / "reports" / provider.value
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def report_basename(aggregated: AggregatedCosts) -> str:
    """File stem encoding the report's date range."""
    return f"usage-{aggregated.start_date}-to-{aggregated.end_date}"


def write_reports(
    aggregated: AggregatedCosts,
    org_id: str,
    provider: Provider | str,
    base_dir: str | Path | None = None,
    generated_at: datetime | None = None,
) -> ReportPaths:
    """Render and write the Markdown, CSV and JSON reports.

    Args:
        aggregated: Aggregated costs for the run.
        org_id: Organization identifier for the report headers.
        provider: Provider the data came from (selects the subdirectory).
        base_dir: Root for the ``reports/`` tree (defaults to the cwd).
        generated_at: Optional fixed timestamp for the Markdown report.

    Returns:
        Paths of the three files written.
    """
    directory = reports_directory(provider, base_dir)
    stem = report_basename(aggregated)
    paths = ReportPaths(
        markdown=directory / f"{stem}.md",
        csv=directory / f"{stem}.csv",
        json=directory / f"{stem}.json",
    )

    paths.markdown.write_text(
        generate_markdown_report(aggregated, org_id, provider, generated_at=generated_at),
        encoding="utf-8",
    )
    paths.csv.write_text(generate_csv_report(aggregated), encoding="utf-8")
    paths.json.write_text(generate_json_report(aggregated, org_id, provider), encoding="utf-8")

    log.info("report_written", directory=str(directory), stem=stem)
    return paths


async def post_json_report(
    url: str,
    report: dict[str, Any],
    client: httpx.AsyncClient | None = None,
    timeout: float = POST_TIMEOUT,
) -> int:
    """POST the JSON report to ``url``.

    Args:
        url: Destination URL.
        report: Report built by ``build_json_report``.
        client: Optional shared httpx client (left open).
        timeout: Request timeout when a client is created here.

    Returns:
        The HTTP status code of the response.

    Raises:
        ReportPostError: Transport failure or an error status.
    """
    try:
        if client is not None:
            response = await client.post(url, json=report)
        else:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.post(url, json=report)
    except httpx.RequestError as e:
        log.error("report_post_failed", url=url, error=str(e))
        raise ReportPostError(f"Failed to post report: {e}", url=url) from e

    if response.status_code >= 400:
        log.error("report_post_failed", url=url, status_code=response.status_code)
        raise ReportPostError(
            f"Failed to post report: HTTP {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    log.info("report_posted", url=url, status_code=response.status_code)
    return response.status_code
