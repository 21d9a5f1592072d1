from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from spendo.models.expense import Expense


def list_expenses(
    db: Session,
    user_id: int,
    *,
    month: str | None = None,
    category: str | None = None,
    keyword: str | None = None,
    newest_first: bool = False,
) -> list[Expense]:
    """All expenses of one user, optionally narrowed by month/category/keyword."""

    filters = [Expense.user_id == user_id]
    if month is not None:
        filters.append(Expense.month == month)
    if category:
        filters.append(Expense.category == category)

    kw = (keyword or "").strip().lower()
    if kw:
        like = f"%{kw}%"
        filters.append(
            func.lower(Expense.item_name).like(like)
            | func.lower(func.coalesce(Expense.notes, "")).like(like)
        )

    stmt = select(Expense).where(*filters)
    if newest_first:
        stmt = stmt.order_by(Expense.created_at.desc(), Expense.id.desc())
    else:
        stmt = stmt.order_by(Expense.month.asc(), Expense.id.asc())
    return list(db.scalars(stmt).all())


def get_expense(db: Session, user_id: int, expense_id: int) -> Expense | None:
    row = db.get(Expense, expense_id)
    if not row or row.user_id != user_id:
        return None
    return row


def list_months(db: Session, user_id: int) -> list[str]:
    rows = db.scalars(
        select(Expense.month).where(Expense.user_id == user_id).distinct().order_by(Expense.month.asc())
    ).all()
    return [str(m) for m in rows]
