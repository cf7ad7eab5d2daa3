"""OpenAI organization costs API client."""

from typing import Any

import httpx

from usage_report.config import OpenAIReportConfig
from usage_report.dates import parse_date, to_unix_seconds
from usage_report.models import CostBucket
from usage_report.providers.base import DEFAULT_TIMEOUT, CostAPIClient

OPENAI_API_BASE = "https://api.openai.com/v1"
OPENAI_COSTS_PATH = "/organization/costs"
OPENAI_PAGE_LIMIT = 180


class OpenAICostsClient(CostAPIClient):
    """Fetches daily cost buckets for one project, grouped by line item.

    OpenAI already returns buckets in the canonical shape, so no field
    mapping is needed beyond decoding.
    """

    provider = "openai"
    base_url = OPENAI_API_BASE
    path = OPENAI_COSTS_PATH

    def __init__(
        self,
        api_key: str,
        org_id: str,
        project_id: str,
        start_date: str,
        end_date: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, timeout=timeout, client=client)
        self._org_id = org_id
        self._project_id = project_id
        self._start_time = to_unix_seconds(parse_date(start_date))
        self._end_time = to_unix_seconds(parse_date(end_date))

    @classmethod
    def from_config(
        cls,
        config: OpenAIReportConfig,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> "OpenAICostsClient":
        """Create a client from a report config."""
        return cls(
            api_key=config.api_key.get_secret_value(),
            org_id=config.org_id,
            project_id=config.project_id,
            start_date=config.start_date,
            end_date=config.end_date,
            timeout=timeout,
            client=client,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "OpenAI-Organization": self._org_id,
        }

    def _query_params(self) -> dict[str, Any]:
        return {
            "start_time": self._start_time,
            "end_time": self._end_time,
            "project_ids[]": [self._project_id],
            "group_by[]": ["line_item"],
            "limit": OPENAI_PAGE_LIMIT,
            "bucket_width": "1d",
        }

    def _parse_bucket(self, data: dict[str, Any]) -> CostBucket:
        return CostBucket.from_api(data)
