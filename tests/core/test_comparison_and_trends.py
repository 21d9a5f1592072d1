"""Tests for spendo.core.comparison and spendo.core.trends."""

from decimal import Decimal

from spendo.core.aggregation import MonthlyAggregate
from spendo.core.comparison import compare, percentage_change
from spendo.core.trends import build_trend


def _agg(month: str, money_in=0, money_out=0) -> MonthlyAggregate:
    return MonthlyAggregate(month=month, total_money_in=Decimal(money_in), total_money_out=Decimal(money_out))


class TestPercentageChange:
    """Tests for percentage_change."""

    def test_increase(self) -> None:
        assert percentage_change(Decimal(100), Decimal(150)) == 50.0

    def test_decrease(self) -> None:
        assert percentage_change(Decimal(200), Decimal(50)) == -75.0

    def test_zero_baseline_is_zero(self) -> None:
        """Should report 0 instead of infinity."""
        assert percentage_change(Decimal(0), Decimal(150)) == 0.0


class TestCompare:
    """Tests for compare."""

    def test_money_out_difference(self) -> None:
        """Should diff month b against month a."""
        result = compare(_agg("2025-05", money_out=100), _agg("2025-06", money_out=150))

        assert result.money_out.difference == Decimal(50)
        assert result.money_out.percentage_change == 50.0
        assert result.money_out.has_baseline

    def test_zero_baseline(self) -> None:
        """Should mark missing baselines instead of dividing by zero."""
        result = compare(_agg("2025-05", money_out=0), _agg("2025-06", money_out=150))

        assert result.money_out.percentage_change == 0.0
        assert result.money_out.difference == Decimal(150)
        assert not result.money_out.has_baseline

    def test_remaining_uses_derived_values(self) -> None:
        result = compare(_agg("2025-05", 1000, 400), _agg("2025-06", 1000, 700))

        assert result.remaining.value_a == Decimal(600)
        assert result.remaining.value_b == Decimal(300)
        assert result.remaining.difference == Decimal(-300)
        assert result.remaining.percentage_change == -50.0

    def test_identical_months(self) -> None:
        result = compare(_agg("2025-05", 10, 10), _agg("2025-06", 10, 10))
        assert result.money_in.percentage_change == 0.0
        assert result.money_in.has_baseline


class TestBuildTrend:
    """Tests for build_trend."""

    def test_single_point_has_zero_growth(self) -> None:
        points = build_trend([_agg("2025-01", 100, 50)])

        assert len(points) == 1
        assert points[0].money_in_growth == 0.0
        assert points[0].money_out_growth == 0.0
        assert points[0].remaining_growth == 0.0

    def test_growth_against_predecessor(self) -> None:
        """Should compare each month with the month before it."""
        points = build_trend([_agg("2025-01", 100, 100), _agg("2025-02", 150, 50), _agg("2025-03", 150, 100)])

        assert [p.month for p in points] == ["2025-01", "2025-02", "2025-03"]
        assert points[1].money_in_growth == 50.0
        assert points[1].money_out_growth == -50.0
        # Previous remaining was 0: no baseline.
        assert points[1].remaining_growth == 0.0
        assert points[2].money_out_growth == 100.0
        assert points[2].remaining_growth == -50.0

    def test_growth_is_rounded(self) -> None:
        points = build_trend([_agg("2025-01", money_out=3), _agg("2025-02", money_out=4)])
        assert points[1].money_out_growth == 33.33

    def test_empty_input(self) -> None:
        assert build_trend([]) == []
