"""End-to-end report run: fetch, aggregate, write, optionally post."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import httpx

from usage_report.aggregator import aggregate_costs
from usage_report.config import ClaudeReportConfig, OpenAIReportConfig
from usage_report.dates import parse_date, validate_date_range
from usage_report.logging import get_logger
from usage_report.models import AggregatedCosts, Provider
from usage_report.providers import fetch_costs
from usage_report.providers.base import DEFAULT_TIMEOUT
from usage_report.reports import build_json_report
from usage_report.writer import ReportPaths, post_json_report, write_reports

log = get_logger("usage_report.pipeline")


@dataclass
class ReportRun:
    """Outcome of one report run."""

    aggregated: AggregatedCosts
    paths: ReportPaths
    posted: bool = False


async def run_report(
    config: OpenAIReportConfig | ClaudeReportConfig,
    *,
    output_dir: str | Path | None = None,
    post_url: str | None = None,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    generated_at: datetime | None = None,
) -> ReportRun:
    """Run one report for ``config``.

    Errors propagate: a failed page fetch aborts the run before anything is
    written, and a failed POST is raised after the files are on disk.
    """
    validate_date_range(parse_date(config.start_date), parse_date(config.end_date))
    provider = Provider(config.provider)

    buckets = await fetch_costs(config, timeout=timeout, client=client)
    aggregated = aggregate_costs(
        buckets, config.start_date, config.end_date, config.report_project_id
    )
    log.info(
        "costs_aggregated",
        provider=provider.value,
        buckets=len(buckets),
        total_cost=round(aggregated.total_cost, 4),
    )

    paths = write_reports(
        aggregated,
        config.report_org_id,
        provider,
        base_dir=output_dir,
        generated_at=generated_at,
    )
    run = ReportRun(aggregated=aggregated, paths=paths)

    if post_url:
        report = build_json_report(aggregated, config.report_org_id, provider)
        await post_json_report(post_url, report, client=client, timeout=timeout)
        run.posted = True

    return run
