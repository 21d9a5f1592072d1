"""Monthly and per-category rollups over transaction records.

Works on anything exposing ``month``, ``category``, ``amount``, ``money_in``
and ``money_out`` attributes, so ORM rows and TransactionRecord instances can
be mixed freely. Aggregates are recomputed from the records on every call.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from spendo.core.extraction import UNCATEGORIZED

ZERO = Decimal(0)


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class MonthlyAggregate:
    month: str
    total_money_in: Decimal = ZERO
    total_money_out: Decimal = ZERO
    total_expenses: int = 0
    money_in_count: int = 0
    money_out_count: int = 0

    @property
    def remaining(self) -> Decimal:
        return self.total_money_in - self.total_money_out

    @property
    def average_money_in(self) -> Decimal:
        if not self.money_in_count:
            return ZERO
        return self.total_money_in / self.money_in_count

    @property
    def average_money_out(self) -> Decimal:
        if not self.money_out_count:
            return ZERO
        return self.total_money_out / self.money_out_count

    @property
    def transaction_count(self) -> int:
        return self.money_in_count + self.money_out_count


@dataclass(frozen=True)
class CategoryAggregate:
    category: str
    total_amount: Decimal = ZERO
    total_money_in: Decimal = ZERO
    total_money_out: Decimal = ZERO
    count: int = 0
    percentage: float = 0.0


def _add(agg: MonthlyAggregate, record: Any) -> MonthlyAggregate:
    money_in = to_decimal(getattr(record, "money_in", None))
    money_out = to_decimal(getattr(record, "money_out", None))
    return MonthlyAggregate(
        month=agg.month,
        total_money_in=agg.total_money_in + money_in,
        total_money_out=agg.total_money_out + money_out,
        total_expenses=agg.total_expenses + 1,
        money_in_count=agg.money_in_count + (1 if money_in > 0 else 0),
        money_out_count=agg.money_out_count + (1 if money_out > 0 else 0),
    )


def summarize(records: Iterable[Any], month: str = "") -> MonthlyAggregate:
    """Fold records into a single aggregate labelled ``month``."""

    agg = MonthlyAggregate(month=month)
    for record in records:
        agg = _add(agg, record)
    return agg


def aggregate_by_month(records: Iterable[Any]) -> dict[str, MonthlyAggregate]:
    """Group by the exact month string; keys come back in ascending order."""

    groups: dict[str, MonthlyAggregate] = {}
    for record in records:
        month = record.month
        agg = groups.get(month) or MonthlyAggregate(month=month)
        groups[month] = _add(agg, record)

    # YYYY-MM sorts chronologically as plain strings.
    return {month: groups[month] for month in sorted(groups)}


def latest_months(aggregates: Mapping[str, MonthlyAggregate] | Iterable[MonthlyAggregate], limit: int) -> list[MonthlyAggregate]:
    """Keep the ``limit`` most recent months, returned oldest first."""

    if isinstance(aggregates, Mapping):
        aggregates = aggregates.values()
    if limit <= 0:
        return []

    newest_first = sorted(aggregates, key=lambda a: a.month, reverse=True)[:limit]
    return sorted(newest_first, key=lambda a: a.month)


def aggregate_by_category(records: Iterable[Any]) -> list[CategoryAggregate]:
    """Per-category totals with each category's share of money out.

    The records passed in define the scope (one month, or all time). Output is
    sorted by money out, largest first; equal totals keep encounter order.
    """

    totals: dict[str, dict[str, Any]] = {}
    for record in records:
        category = (getattr(record, "category", None) or "").strip() or UNCATEGORIZED
        bucket = totals.setdefault(
            category,
            {"amount": ZERO, "money_in": ZERO, "money_out": ZERO, "count": 0},
        )
        bucket["amount"] += to_decimal(getattr(record, "amount", None))
        bucket["money_in"] += to_decimal(getattr(record, "money_in", None))
        bucket["money_out"] += to_decimal(getattr(record, "money_out", None))
        bucket["count"] += 1

    scope_out = sum((b["money_out"] for b in totals.values()), ZERO)

    items = [
        CategoryAggregate(
            category=category,
            total_amount=b["amount"],
            total_money_in=b["money_in"],
            total_money_out=b["money_out"],
            count=b["count"],
            percentage=float(b["money_out"] / scope_out * 100) if scope_out > 0 else 0.0,
        )
        for category, b in totals.items()
    ]
    items.sort(key=lambda c: c.total_money_out, reverse=True)
    return items
