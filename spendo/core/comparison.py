from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from spendo.core.aggregation import MonthlyAggregate


def percentage_change(previous: Decimal, current: Decimal) -> float:
    """Percent change from ``previous`` to ``current``.

    A zero baseline yields 0 rather than infinity; callers that need to tell
    "no baseline" apart from "no change" must check ``previous`` themselves.
    """

    if previous == 0:
        return 0.0
    return float((current - previous) / previous * 100)


@dataclass(frozen=True)
class MetricComparison:
    value_a: Decimal
    value_b: Decimal
    difference: Decimal
    percentage_change: float

    @property
    def has_baseline(self) -> bool:
        return self.value_a != 0


@dataclass(frozen=True)
class ComparisonResult:
    money_in: MetricComparison
    money_out: MetricComparison
    remaining: MetricComparison


def compare_metric(a: Decimal, b: Decimal) -> MetricComparison:
    return MetricComparison(
        value_a=a,
        value_b=b,
        difference=b - a,
        percentage_change=percentage_change(a, b),
    )


def compare(a: MonthlyAggregate, b: MonthlyAggregate) -> ComparisonResult:
    return ComparisonResult(
        money_in=compare_metric(a.total_money_in, b.total_money_in),
        money_out=compare_metric(a.total_money_out, b.total_money_out),
        remaining=compare_metric(a.remaining, b.remaining),
    )
