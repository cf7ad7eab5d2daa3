"""Cost aggregation.

Turns the canonical bucket sequence into totals, a per-line-item map and a
flat per-day list, plus the ranked and grouped views the renderers share.
"""

from collections import defaultdict
from collections.abc import Iterable

from usage_report.dates import utc_date
from usage_report.models import AggregatedCosts, CostBucket, DailyCost, LineItemCost

UNKNOWN_LINE_ITEM = "unknown"


def aggregate_costs(
    buckets: Iterable[CostBucket],
    start_date: str,
    end_date: str,
    project_id: str,
) -> AggregatedCosts:
    """Aggregate cost buckets into one summary.

    Args:
        buckets: Canonical buckets in the order the provider returned them.
        start_date: Report start date, echoed into the result.
        end_date: Report end date, echoed into the result.
        project_id: Identifier used for display and the CSV project column.

    Returns:
        AggregatedCosts. ``billing_days`` is the number of buckets, including
        buckets with no results.

    Raises:
        ValueError: A result amount is a string that is not numeric.
    """
    daily_costs: list[DailyCost] = []
    costs_by_line_item: dict[str, float] = {}
    total_cost = 0.0
    billing_days = 0

    for bucket in buckets:
        billing_days += 1
        date = utc_date(bucket.start_time)

        for result in bucket.results:
            cost = result.amount.as_float()
            line_item = result.line_item or UNKNOWN_LINE_ITEM

            total_cost += cost
            costs_by_line_item[line_item] = costs_by_line_item.get(line_item, 0.0) + cost
            daily_costs.append(DailyCost(date=date, line_item=line_item, cost=cost))

    average_daily_cost = total_cost / billing_days if billing_days > 0 else 0.0

    return AggregatedCosts(
        total_cost=total_cost,
        start_date=start_date,
        end_date=end_date,
        project_id=project_id,
        daily_costs=daily_costs,
        costs_by_line_item=costs_by_line_item,
        billing_days=billing_days,
        average_daily_cost=average_daily_cost,
    )


def rank_line_items(aggregated: AggregatedCosts) -> list[LineItemCost]:
    """Line items by descending cost with their share of the total.

    Ties keep the map's insertion order. Percentage is 0 when the total is 0.
    """
    ranked = sorted(aggregated.costs_by_line_item.items(), key=lambda x: x[1], reverse=True)
    total = aggregated.total_cost
    return [
        LineItemCost(
            line_item=line_item,
            cost=cost,
            percentage=(cost / total * 100) if total > 0 else 0.0,
        )
        for line_item, cost in ranked
    ]


def top_line_items(aggregated: AggregatedCosts, limit: int = 5) -> list[LineItemCost]:
    """The ``limit`` most expensive line items."""
    return rank_line_items(aggregated)[:limit]


def daily_totals(aggregated: AggregatedCosts) -> list[tuple[str, float]]:
    """Sum daily records per date, sorted ascending by date string."""
    totals: dict[str, float] = defaultdict(float)
    for daily in aggregated.daily_costs:
        totals[daily.date] += daily.cost
    return sorted(totals.items(), key=lambda x: x[0])
