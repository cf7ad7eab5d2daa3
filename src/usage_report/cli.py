"""Command-line entry point for usage-report."""

from __future__ import annotations

import asyncio
import sys

import click
from pydantic import ValidationError

from usage_report.config import get_settings, load_config
from usage_report.dates import parse_date, validate_date_range
from usage_report.exceptions import ConfigurationError, DateValidationError, UsageReportError
from usage_report.logging import setup_logging
from usage_report.models import Provider
from usage_report.pipeline import run_report
from usage_report.reports import format_terminal_summary

EXAMPLES = (
    "\b\nExamples:\n"
    "  usage-report 2024-01-01 2024-01-31\n"
    "  usage-report 2024-01-01 2024-01-31 --provider claude"
)


@click.command(epilog=EXAMPLES)
@click.argument("start_date")
@click.argument("end_date")
@click.option(
    "--provider",
    type=click.Choice([p.value for p in Provider]),
    default=Provider.OPENAI.value,
    show_default=True,
    help="Cost API to report on",
)
@click.option("--post-url", default=None, help="POST the JSON report to this URL")
@click.option(
    "--output-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Root directory for the reports/ tree (default: REPORTS_DIR or cwd)",
)
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def main(
    start_date: str,
    end_date: str,
    provider: str,
    post_url: str | None,
    output_dir: str | None,
    verbose: bool,
) -> None:
    """Generate usage/billing reports for START_DATE to END_DATE (YYYY-MM-DD).

    END_DATE is exclusive and must be after START_DATE.
    """
    try:
        validate_date_range(parse_date(start_date), parse_date(end_date))
    except DateValidationError as e:
        raise click.UsageError(str(e)) from e

    try:
        settings = get_settings()
    except ValidationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    if verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    setup_logging(settings)

    try:
        config = load_config(start_date, end_date, provider, settings=settings)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(f"\nHint: {e.hint}", err=True)
        sys.exit(1)

    selected = Provider(provider)
    click.echo(selected.title)
    click.echo("=" * len(selected.title) + "\n")
    click.echo(f"Fetching costs from {start_date} to {end_date}...")

    try:
        run = asyncio.run(
            run_report(
                config,
                output_dir=output_dir if output_dir is not None else settings.reports_dir,
                post_url=post_url,
                timeout=settings.request_timeout,
            )
        )
    except UsageReportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Error: Unexpected data from {selected.value}: {e}", err=True)
        sys.exit(1)

    click.echo(f"Received {run.aggregated.billing_days} daily buckets\n")
    click.echo(format_terminal_summary(run.aggregated, selected, run.paths.all()))
    if run.posted:
        click.echo(f"\nJSON report posted to {post_url}")


if __name__ == "__main__":
    main()
