from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from spendo.core.aggregation import MonthlyAggregate
from spendo.core.comparison import percentage_change


@dataclass(frozen=True)
class TrendPoint:
    aggregate: MonthlyAggregate
    money_in_growth: float = 0.0
    money_out_growth: float = 0.0
    remaining_growth: float = 0.0

    @property
    def month(self) -> str:
        return self.aggregate.month


def build_trend(aggregates: Sequence[MonthlyAggregate]) -> list[TrendPoint]:
    """Attach period-over-period growth to month aggregates.

    ``aggregates`` must already be in ascending month order. Each point is
    compared with the one right before it; the first point has no predecessor
    and gets zero growth.
    """

    points: list[TrendPoint] = []
    for index, agg in enumerate(aggregates):
        if index == 0:
            points.append(TrendPoint(aggregate=agg))
            continue

        prev = aggregates[index - 1]
        points.append(
            TrendPoint(
                aggregate=agg,
                money_in_growth=round(percentage_change(prev.total_money_in, agg.total_money_in), 2),
                money_out_growth=round(percentage_change(prev.total_money_out, agg.total_money_out), 2),
                remaining_growth=round(percentage_change(prev.remaining, agg.remaining), 2),
            )
        )
    return points
