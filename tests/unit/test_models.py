"""Tests for the cost data model."""

import pytest

from usage_report.models import (
    AggregatedCosts,
    CostAmount,
    CostBucket,
    CostResult,
    DailyCost,
    Provider,
)


class TestProvider:
    def test_titles(self):
        assert Provider.OPENAI.title == "OpenAI API Usage Report"
        assert Provider.CLAUDE.title == "Claude API Usage Report"

    def test_from_value(self):
        assert Provider("claude") is Provider.CLAUDE


class TestCostAmount:
    def test_numeric_string(self):
        assert CostAmount(value="0.125").as_float() == 0.125

    def test_non_numeric_string_raises(self):
        with pytest.raises(ValueError):
            CostAmount(value="n/a").as_float()

    def test_from_api_defaults(self):
        amount = CostAmount.from_api({})
        assert amount.value == 0
        assert amount.currency == "usd"


class TestCostBucket:
    def test_from_api(self):
        data = {
            "object": "bucket",
            "start_time": 1704067200,
            "end_time": 1704153600,
            "results": [
                {
                    "object": "organization.costs.result",
                    "amount": {"value": "1.5", "currency": "usd"},
                    "line_item": "gpt-4o, input",
                    "project_id": "proj_1",
                },
                {"amount": {"value": 0.25, "currency": "usd"}, "line_item": None},
            ],
        }

        bucket = CostBucket.from_api(data)

        assert bucket.start_time == 1704067200
        assert len(bucket.results) == 2
        assert bucket.results[0] == CostResult(
            amount=CostAmount(value="1.5"), line_item="gpt-4o, input", project_id="proj_1"
        )
        assert bucket.results[1].line_item is None
        assert bucket.results[1].project_id is None

    def test_missing_results(self):
        bucket = CostBucket.from_api({"start_time": 1, "end_time": 2})
        assert bucket.results == ()

    def test_null_results(self):
        bucket = CostBucket.from_api({"start_time": 1, "end_time": 2, "results": None})
        assert bucket.results == ()


class TestAggregatedCosts:
    def test_daily_cost_json_keys(self):
        assert DailyCost("2024-01-01", "gpt-4", 1.5).to_dict() == {
            "date": "2024-01-01",
            "lineItem": "gpt-4",
            "cost": 1.5,
        }

    def test_has_usage(self):
        empty = AggregatedCosts(0.0, "2024-01-01", "2024-01-02", "proj_1")
        assert not empty.has_usage

        used = AggregatedCosts(
            1.0, "2024-01-01", "2024-01-02", "proj_1", costs_by_line_item={"gpt-4": 1.0}
        )
        assert used.has_usage
