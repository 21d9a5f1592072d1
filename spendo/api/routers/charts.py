from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from spendo.api.deps import get_current_user, get_db, parse_month_scope
from spendo.core.aggregation import aggregate_by_category, aggregate_by_month, latest_months
from spendo.core.config import settings
from spendo.core.trends import build_trend
from spendo.db.queries import list_expenses
from spendo.models.user import User
from spendo.schemas.stats import (
    CategoryAmountOut,
    CategoryDistributionOut,
    MonthlySummaryOut,
    MonthlyTotalsOut,
    TrendOut,
    TrendPointOut,
)

router = APIRouter(prefix="/chart", tags=["chart"])


def _resolve_limit(limit: int | None) -> int:
    if limit is None:
        return settings.chart_default_limit
    if limit < 1 or limit > 120:
        raise HTTPException(status_code=400, detail="Invalid limit")
    return limit


@router.get("/monthly", response_model=MonthlyTotalsOut)
def monthly_totals(
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MonthlyTotalsOut:
    months = latest_months(aggregate_by_month(list_expenses(db, current_user.id)), _resolve_limit(limit))
    data = [MonthlySummaryOut.from_aggregate(m) for m in months]
    return MonthlyTotalsOut(count=len(data), data=data)


@router.get("/category/{month}", response_model=CategoryDistributionOut)
def category_distribution(
    month: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CategoryDistributionOut:
    scope = parse_month_scope(month)
    categories = aggregate_by_category(list_expenses(db, current_user.id, month=scope))

    total_out = sum(float(c.total_money_out) for c in categories)
    return CategoryDistributionOut(
        month=month,
        count=len(categories),
        totalMoneyOut=total_out,
        data=[CategoryAmountOut.from_aggregate(c) for c in categories],
    )


@router.get("/trend", response_model=TrendOut)
def trends(
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TrendOut:
    months = latest_months(aggregate_by_month(list_expenses(db, current_user.id)), _resolve_limit(limit))
    data = [TrendPointOut.from_point(p) for p in build_trend(months)]
    return TrendOut(count=len(data), data=data)
