from __future__ import annotations

from pydantic import BaseModel, Field

from spendo.core.aggregation import CategoryAggregate, MonthlyAggregate
from spendo.core.comparison import MetricComparison
from spendo.core.months import format_month_for_display
from spendo.core.trends import TrendPoint


class MonthlySummaryOut(BaseModel):
    month: str = Field(description="YYYY-MM, or all-time")
    monthLabel: str
    totalMoneyIn: float
    totalMoneyOut: float
    remaining: float
    totalExpenses: int

    @classmethod
    def from_aggregate(cls, agg: MonthlyAggregate) -> "MonthlySummaryOut":
        return cls(
            month=agg.month,
            monthLabel=format_month_for_display(agg.month),
            totalMoneyIn=float(agg.total_money_in),
            totalMoneyOut=float(agg.total_money_out),
            remaining=float(agg.remaining),
            totalExpenses=agg.total_expenses,
        )


class CategoryAmountOut(BaseModel):
    category: str
    totalAmount: float
    totalMoneyIn: float
    totalMoneyOut: float
    count: int
    percentage: float

    @classmethod
    def from_aggregate(cls, agg: CategoryAggregate) -> "CategoryAmountOut":
        return cls(
            category=agg.category,
            totalAmount=float(agg.total_amount),
            totalMoneyIn=float(agg.total_money_in),
            totalMoneyOut=float(agg.total_money_out),
            count=agg.count,
            percentage=agg.percentage,
        )


class ExpenseSummaryOut(BaseModel):
    month: str
    summary: MonthlySummaryOut
    categoryBreakdown: list[CategoryAmountOut]


class MetricCompareOut(BaseModel):
    month1: float
    month2: float
    difference: float
    percentageChange: float
    # False when month1 is zero: percentageChange is then 0 by convention, not "no change".
    hasBaseline: bool

    @classmethod
    def from_comparison(cls, item: MetricComparison) -> "MetricCompareOut":
        return cls(
            month1=float(item.value_a),
            month2=float(item.value_b),
            difference=float(item.difference),
            percentageChange=item.percentage_change,
            hasBaseline=item.has_baseline,
        )


class ComparisonOut(BaseModel):
    moneyIn: MetricCompareOut
    moneyOut: MetricCompareOut
    remaining: MetricCompareOut


class CompareOut(BaseModel):
    comparison: ComparisonOut
    month1: MonthlySummaryOut
    month2: MonthlySummaryOut


class MonthlyTotalsOut(BaseModel):
    count: int
    data: list[MonthlySummaryOut]


class CategoryDistributionOut(BaseModel):
    month: str = Field(description="YYYY-MM, or all-time")
    count: int
    totalMoneyOut: float
    data: list[CategoryAmountOut]


class TrendPointOut(BaseModel):
    month: str = Field(description="YYYY-MM")
    monthLabel: str
    totalMoneyIn: float
    totalMoneyOut: float
    remaining: float
    averageMoneyIn: float
    averageMoneyOut: float
    transactionCount: int
    moneyInGrowth: float
    moneyOutGrowth: float
    remainingGrowth: float

    @classmethod
    def from_point(cls, point: TrendPoint) -> "TrendPointOut":
        agg = point.aggregate
        return cls(
            month=agg.month,
            monthLabel=format_month_for_display(agg.month),
            totalMoneyIn=float(agg.total_money_in),
            totalMoneyOut=float(agg.total_money_out),
            remaining=float(agg.remaining),
            averageMoneyIn=round(float(agg.average_money_in), 2),
            averageMoneyOut=round(float(agg.average_money_out), 2),
            transactionCount=agg.transaction_count,
            moneyInGrowth=point.money_in_growth,
            moneyOutGrowth=point.money_out_growth,
            remainingGrowth=point.remaining_growth,
        )


class TrendOut(BaseModel):
    count: int
    data: list[TrendPointOut]
