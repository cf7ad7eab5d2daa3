"""Vendor cost API clients."""

import httpx

from usage_report.config import ClaudeReportConfig, OpenAIReportConfig
from usage_report.models import CostBucket
from usage_report.providers.anthropic import ClaudeCostsClient
from usage_report.providers.base import DEFAULT_TIMEOUT, CostAPIClient
from usage_report.providers.openai import OpenAICostsClient


def create_client(
    config: OpenAIReportConfig | ClaudeReportConfig,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.AsyncClient | None = None,
) -> CostAPIClient:
    """Create the cost client matching ``config.provider``."""
    if isinstance(config, OpenAIReportConfig):
        return OpenAICostsClient.from_config(config, timeout=timeout, client=client)
    return ClaudeCostsClient.from_config(config, timeout=timeout, client=client)


async def fetch_costs(
    config: OpenAIReportConfig | ClaudeReportConfig,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.AsyncClient | None = None,
) -> list[CostBucket]:
    """Fetch all canonical cost buckets for the configured provider and range."""
    async with create_client(config, timeout=timeout, client=client) as api:
        return await api.fetch_costs()


__all__ = [
    "ClaudeCostsClient",
    "CostAPIClient",
    "OpenAICostsClient",
    "create_client",
    "fetch_costs",
]
