"""Pytest fixtures for usage-report tests."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import structlog

from usage_report.models import CostAmount, CostBucket, CostResult

CREDENTIAL_VARS = (
    "OPENAI_ADMIN_KEY",
    "OPENAI_ORG_ID",
    "OPENAI_PROJECT_ID",
    "ANTHROPIC_ADMIN_API_KEY",
    "REPORTS_DIR",
    "REQUEST_TIMEOUT",
    "LOG_LEVEL",
    "LOG_TO_FILE",
    "ENVIRONMENT",
)

# 2024-01-01T00:00:00Z and 2024-01-02T00:00:00Z
JAN_1 = 1704067200
JAN_2 = 1704153600
JAN_3 = 1704240000


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Isolate every test from real credentials and a stray .env file."""
    for var in CREDENTIAL_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)

    from usage_report.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def mock_response():
    """Create a mock httpx.Response."""

    def _create(status_code: int = 200, json_data: dict | list | None = None, text: str = ""):
        response = MagicMock(spec=httpx.Response)
        response.status_code = status_code
        response.text = text
        if json_data is not None:
            response.json.return_value = json_data
        else:
            response.json.side_effect = ValueError("No JSON")
        return response

    return _create


@pytest.fixture
def mock_http_client():
    """An AsyncMock standing in for an open httpx.AsyncClient."""
    client = AsyncMock(spec=httpx.AsyncClient)
    client.is_closed = False
    return client


def _make_bucket(start_time: int, *items: tuple[str | None, float | str]) -> CostBucket:
    """Build a one-day bucket from (line_item, value) pairs."""
    return CostBucket(
        start_time=start_time,
        end_time=start_time + 86400,
        results=tuple(
            CostResult(amount=CostAmount(value=value), line_item=line_item, project_id="proj_1")
            for line_item, value in items
        ),
    )


@pytest.fixture
def make_bucket():
    """Factory for one-day buckets."""
    return _make_bucket


@pytest.fixture
def sample_buckets() -> list[CostBucket]:
    """Two days of OpenAI-style buckets."""
    return [
        _make_bucket(JAN_1, ("gpt-4", 1.5), ("gpt-3.5", 0.5)),
        _make_bucket(JAN_2, ("gpt-4", "2.25")),
    ]
