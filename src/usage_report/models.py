"""Canonical cost data model.

Both vendor APIs are normalized into ``CostBucket`` / ``CostResult``; the
aggregator turns a bucket sequence into one ``AggregatedCosts`` per run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Provider(Enum):
    """Supported cost-reporting providers."""

    OPENAI = "openai"
    CLAUDE = "claude"

    @property
    def title(self) -> str:
        """Report title for this provider."""
        if self is Provider.CLAUDE:
            return "Claude API Usage Report"
        return "OpenAI API Usage Report"


@dataclass(frozen=True)
class CostAmount:
    """A cost in major currency units (dollars).

    OpenAI sometimes transmits ``value`` as a numeric string.
    """

    value: float | str
    currency: str = "usd"

    def as_float(self) -> float:
        """Return the value as a float (raises ValueError for non-numeric strings)."""
        return float(self.value)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CostAmount":
        """Create from an API ``amount`` object."""
        return cls(value=data.get("value", 0), currency=data.get("currency", "usd"))


@dataclass(frozen=True)
class CostResult:
    """One priced line item within a bucket."""

    amount: CostAmount
    line_item: str | None
    project_id: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CostResult":
        """Create from an OpenAI ``organization.costs.result`` object."""
        return cls(
            amount=CostAmount.from_api(data.get("amount") or {}),
            line_item=data.get("line_item"),
            project_id=data.get("project_id"),
        )


@dataclass(frozen=True)
class CostBucket:
    """One time-bounded window (one UTC day) of cost results."""

    start_time: int
    end_time: int
    results: tuple[CostResult, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CostBucket":
        """Create from an OpenAI ``bucket`` object."""
        return cls(
            start_time=int(data["start_time"]),
            end_time=int(data["end_time"]),
            results=tuple(CostResult.from_api(r) for r in data.get("results") or []),
        )


@dataclass(frozen=True)
class CostPage:
    """A single decoded page of a paginated cost response."""

    buckets: list[CostBucket]
    has_more: bool = False
    next_page: str | None = None


@dataclass(frozen=True)
class DailyCost:
    """One line item's cost on one day."""

    date: str  # YYYY-MM-DD
    line_item: str
    cost: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON report shape."""
        return {"date": self.date, "lineItem": self.line_item, "cost": self.cost}


@dataclass(frozen=True)
class LineItemCost:
    """A line item ranked by its share of the total."""

    line_item: str
    cost: float
    percentage: float


@dataclass(frozen=True)
class AggregatedCosts:
    """Totals and breakdowns for one report run."""

    total_cost: float
    start_date: str
    end_date: str
    project_id: str
    daily_costs: list[DailyCost] = field(default_factory=list)
    costs_by_line_item: dict[str, float] = field(default_factory=dict)
    billing_days: int = 0
    average_daily_cost: float = 0.0

    @property
    def has_usage(self) -> bool:
        """True when at least one line item was billed."""
        return bool(self.costs_by_line_item)
