"""Tests for the end-to-end report run."""

import json
from datetime import UTC, datetime

import pytest
from pydantic import SecretStr

from usage_report.config import ClaudeReportConfig, OpenAIReportConfig
from usage_report.exceptions import DateRangeError, ProviderAPIError, ReportPostError
from usage_report.pipeline import run_report


@pytest.fixture
def openai_config():
    return OpenAIReportConfig(
        start_date="2024-01-01",
        end_date="2024-01-03",
        api_key=SecretStr("sk-admin"),
        org_id="org-x",
        project_id="proj_1",
    )


@pytest.fixture
def claude_config():
    return ClaudeReportConfig(
        start_date="2024-01-01", end_date="2024-01-02", api_key=SecretStr("sk-ant-admin")
    )


def openai_payload(*buckets, has_more=False, next_page=None):
    return {"object": "page", "data": list(buckets), "has_more": has_more, "next_page": next_page}


def openai_bucket(start_time, *items):
    return {
        "object": "bucket",
        "start_time": start_time,
        "end_time": start_time + 86400,
        "results": [
            {
                "object": "organization.costs.result",
                "amount": {"value": value, "currency": "usd"},
                "line_item": line_item,
                "project_id": "proj_1",
            }
            for line_item, value in items
        ],
    }


class TestRunReport:
    """Tests for run_report."""

    @pytest.mark.asyncio
    async def test_openai_run_writes_all_reports(
        self, openai_config, mock_http_client, mock_response, tmp_path
    ):
        mock_http_client.get.side_effect = [
            mock_response(
                200,
                openai_payload(
                    openai_bucket(1704067200, ("gpt-4", 3.0), ("gpt-3.5", "2.0")),
                    has_more=True,
                    next_page="page_2",
                ),
            ),
            mock_response(200, openai_payload(openai_bucket(1704153600))),
        ]

        run = await run_report(
            openai_config,
            output_dir=tmp_path,
            client=mock_http_client,
            generated_at=datetime(2024, 1, 3, tzinfo=UTC),
        )

        assert run.aggregated.total_cost == pytest.approx(5.0)
        assert run.aggregated.billing_days == 2
        assert run.aggregated.project_id == "proj_1"
        assert run.posted is False
        assert run.paths.markdown.parent == tmp_path / "reports" / "openai"
        assert "**Organization:** org-x" in run.paths.markdown.read_text(encoding="utf-8")
        assert run.paths.csv.read_text(encoding="utf-8").splitlines()[1:] == [
            "2024-01-01,gpt-3.5,2.00,proj_1",
            "2024-01-01,gpt-4,3.00,proj_1",
        ]
        report = json.loads(run.paths.json.read_text(encoding="utf-8"))
        assert report["costsByLineItem"][0] == {"lineItem": "gpt-4", "cost": 3.0, "percentage": 60}
        mock_http_client.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_claude_run_uses_default_identifiers(
        self, claude_config, mock_http_client, mock_response, tmp_path
    ):
        mock_http_client.get.return_value = mock_response(
            200,
            {
                "data": [
                    {
                        "starting_at": "2024-01-01T00:00:00Z",
                        "ending_at": "2024-01-02T00:00:00Z",
                        "results": [
                            {
                                "amount": "250",
                                "currency": "USD",
                                "description": None,
                                "model": "claude-3-opus",
                                "cost_type": "tokens",
                            }
                        ],
                    }
                ],
                "has_more": False,
                "next_page": None,
            },
        )

        run = await run_report(claude_config, output_dir=tmp_path, client=mock_http_client)

        assert run.aggregated.project_id == "default"
        assert run.aggregated.costs_by_line_item == {"claude-3-opus tokens": 2.5}
        assert run.paths.csv.parent == tmp_path / "reports" / "claude"
        report = json.loads(run.paths.json.read_text(encoding="utf-8"))
        assert report["metadata"]["organizationId"] == "default"
        assert report["metadata"]["provider"] == "claude"

    @pytest.mark.asyncio
    async def test_posts_json_report(
        self, claude_config, mock_http_client, mock_response, tmp_path
    ):
        mock_http_client.get.return_value = mock_response(
            200, {"data": [], "has_more": False, "next_page": None}
        )
        mock_http_client.post.return_value = mock_response(200, {})

        run = await run_report(
            claude_config,
            output_dir=tmp_path,
            post_url="https://hooks.example/usage",
            client=mock_http_client,
        )

        assert run.posted is True
        url = mock_http_client.post.call_args.args[0]
        body = mock_http_client.post.call_args.kwargs["json"]
        assert url == "https://hooks.example/usage"
        assert body == json.loads(run.paths.json.read_text(encoding="utf-8"))

    @pytest.mark.asyncio
    async def test_failed_post_keeps_written_files(
        self, claude_config, mock_http_client, mock_response, tmp_path
    ):
        mock_http_client.get.return_value = mock_response(
            200, {"data": [], "has_more": False, "next_page": None}
        )
        mock_http_client.post.return_value = mock_response(503, text="down")

        with pytest.raises(ReportPostError):
            await run_report(
                claude_config,
                output_dir=tmp_path,
                post_url="https://hooks.example/usage",
                client=mock_http_client,
            )

        written = sorted(p.name for p in (tmp_path / "reports" / "claude").iterdir())
        assert written == [
            "usage-2024-01-01-to-2024-01-02.csv",
            "usage-2024-01-01-to-2024-01-02.json",
            "usage-2024-01-01-to-2024-01-02.md",
        ]

    @pytest.mark.asyncio
    async def test_fetch_failure_writes_nothing(
        self, openai_config, mock_http_client, mock_response, tmp_path
    ):
        mock_http_client.get.return_value = mock_response(500, text="oops")

        with pytest.raises(ProviderAPIError):
            await run_report(openai_config, output_dir=tmp_path, client=mock_http_client)

        assert not (tmp_path / "reports").exists()

    @pytest.mark.asyncio
    async def test_rejects_reversed_range_before_fetching(self, mock_http_client, tmp_path):
        config = ClaudeReportConfig(
            start_date="2024-01-31", end_date="2024-01-01", api_key=SecretStr("k")
        )

        with pytest.raises(DateRangeError):
            await run_report(config, output_dir=tmp_path, client=mock_http_client)

        mock_http_client.get.assert_not_awaited()
