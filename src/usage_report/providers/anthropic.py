"""Anthropic (Claude) cost report API client and normalization.

The cost report differs from OpenAI's shape in three ways: bucket bounds are
RFC 3339 strings, amounts are decimal strings in cents, and there is no
single ``line_item`` field. ``normalize_claude_bucket`` maps a raw bucket
onto the canonical ``CostBucket``.
"""

from typing import Any

import httpx

from usage_report.config import ClaudeReportConfig
from usage_report.dates import parse_rfc3339, to_rfc3339
from usage_report.models import CostAmount, CostBucket, CostResult
from usage_report.providers.base import DEFAULT_TIMEOUT, CostAPIClient

ANTHROPIC_API_BASE = "https://api.anthropic.com/v1"
ANTHROPIC_COST_REPORT_PATH = "/organizations/cost_report"
ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_PAGE_LIMIT = 31

UNKNOWN_LINE_ITEM = "unknown"


def claude_line_item(result: dict[str, Any]) -> str:
    """Pick a display label for a raw cost report result.

    Priority: ``description``, then ``model`` and ``cost_type`` joined by a
    space (skipping empty parts), then ``"unknown"``.
    """
    description = result.get("description")
    if description is not None:
        label = str(description)
    else:
        parts = (result.get("model"), result.get("cost_type"))
        label = " ".join(str(part) for part in parts if part)
    return label or UNKNOWN_LINE_ITEM


def normalize_claude_result(result: dict[str, Any]) -> CostResult:
    """Convert a raw result (amount in cents) into a canonical result in dollars."""
    cost_usd = float(result["amount"]) / 100
    return CostResult(
        amount=CostAmount(value=cost_usd, currency=result.get("currency", "USD")),
        line_item=claude_line_item(result),
        project_id=None,
    )


def normalize_claude_bucket(bucket: dict[str, Any]) -> CostBucket:
    """Convert a raw cost report bucket into a canonical ``CostBucket``."""
    return CostBucket(
        start_time=parse_rfc3339(bucket["starting_at"]),
        end_time=parse_rfc3339(bucket["ending_at"]),
        results=tuple(normalize_claude_result(r) for r in bucket.get("results") or []),
    )


class ClaudeCostsClient(CostAPIClient):
    """Fetches the organization's daily cost report grouped by description."""

    provider = "claude"
    base_url = ANTHROPIC_API_BASE
    path = ANTHROPIC_COST_REPORT_PATH

    def __init__(
        self,
        api_key: str,
        start_date: str,
        end_date: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, timeout=timeout, client=client)
        self._starting_at = to_rfc3339(start_date)
        self._ending_at = to_rfc3339(end_date)

    @classmethod
    def from_config(
        cls,
        config: ClaudeReportConfig,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> "ClaudeCostsClient":
        """Create a client from a report config."""
        return cls(
            api_key=config.api_key.get_secret_value(),
            start_date=config.start_date,
            end_date=config.end_date,
            timeout=timeout,
            client=client,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _query_params(self) -> dict[str, Any]:
        return {
            "starting_at": self._starting_at,
            "ending_at": self._ending_at,
            "bucket_width": "1d",
            "limit": ANTHROPIC_PAGE_LIMIT,
            "group_by[]": ["description"],
        }

    def _parse_bucket(self, data: dict[str, Any]) -> CostBucket:
        return normalize_claude_bucket(data)
