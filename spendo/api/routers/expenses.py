from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from spendo.api.deps import ALL_TIME, ensure_month, get_current_user, get_db, parse_month_scope
from spendo.core.aggregation import aggregate_by_category, summarize
from spendo.core.comparison import compare
from spendo.core.config import settings
from spendo.core.extraction import BatchValidationError, RowIssue, check_row, extract_batch
from spendo.core.months import format_month_for_display
from spendo.core.spreadsheet import SpreadsheetError, read_rows
from spendo.db.queries import get_expense, list_expenses, list_months
from spendo.models.expense import Expense
from spendo.models.user import User
from spendo.schemas.expense import (
    ExpenseCreate,
    ExpenseListOut,
    ExpenseOut,
    ExpenseUpdate,
    PreviewOut,
    PreviewRowOut,
    RowErrorOut,
    RowIssueOut,
    UploadOut,
    UploadRequest,
)
from spendo.schemas.stats import CategoryAmountOut, CompareOut, ComparisonOut, ExpenseSummaryOut, MetricCompareOut, MonthlySummaryOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _as_utc(dt: datetime) -> datetime:
    # Stored as UTC-naive; expose as UTC-aware.
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc)
    return dt.replace(tzinfo=timezone.utc)


def _expense_out(row: Expense) -> ExpenseOut:
    return ExpenseOut(
        id=row.id,
        month=row.month,
        monthLabel=format_month_for_display(row.month),
        itemName=row.item_name,
        category=row.category,
        amount=float(row.amount),
        moneyIn=float(row.money_in),
        moneyOut=float(row.money_out),
        remaining=float(row.money_in - row.money_out),
        notes=row.notes,
        createdAt=_as_utc(row.created_at),
        updatedAt=_as_utc(row.updated_at),
    )


def _issue_out(issue: RowIssue) -> RowIssueOut:
    return RowIssueOut(
        field=issue.field,
        message=issue.message,
        value=None if issue.value is None else str(issue.value),
    )


def _clean_category(value: str) -> str:
    category = value.strip()
    if not category:
        raise HTTPException(status_code=400, detail="Category is required")
    return category


def _ensure_row_limit(count: int) -> None:
    if count > settings.upload_max_rows:
        raise HTTPException(status_code=413, detail=f"Too many rows (max {settings.upload_max_rows})")


@router.post("", response_model=ExpenseOut, status_code=201)
def create_expense(
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExpenseOut:
    amount = payload.amount
    if amount is None:
        amount = payload.moneyOut or payload.moneyIn

    row = Expense(
        user_id=current_user.id,
        month=payload.month,
        item_name=payload.itemName.strip(),
        category=_clean_category(payload.category),
        amount=amount,
        money_in=payload.moneyIn,
        money_out=payload.moneyOut,
        notes=payload.notes or None,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return _expense_out(row)


@router.post("/upload", response_model=UploadOut, status_code=201)
def upload_expenses(
    payload: UploadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UploadOut:
    """Bulk insert loosely keyed rows.

    Every row is extracted and validated first; a single bad row rejects the
    whole batch (422 listing all bad rows), otherwise all rows are committed
    in one transaction.
    """

    _ensure_row_limit(len(payload.expenses))

    try:
        records = extract_batch(payload.expenses)
    except BatchValidationError as exc:
        logger.warning("Rejected upload from user id=%s: %s", current_user.id, exc)
        errors = [
            RowErrorOut(row=err.index + 1, issues=[_issue_out(i) for i in err.issues]).model_dump()
            for err in exc.errors
        ]
        raise HTTPException(status_code=422, detail={"message": str(exc), "errors": errors})

    rows = [
        Expense(
            user_id=current_user.id,
            month=r.month,
            item_name=r.item_name,
            category=r.category,
            amount=r.amount,
            money_in=r.money_in,
            money_out=r.money_out,
            notes=r.notes or None,
        )
        for r in records
    ]
    db.add_all(rows)
    db.commit()

    logger.info("Uploaded %d expenses for user id=%s", len(rows), current_user.id)
    items = [_expense_out(r) for r in rows]
    return UploadOut(count=len(items), items=items)


@router.post("/upload/preview", response_model=PreviewOut)
def preview_upload(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
) -> PreviewOut:
    """Parse a spreadsheet and report what would be imported. Nothing is saved."""

    filename = file.filename or ""
    try:
        rows = read_rows(filename, file.file.read())
    except SpreadsheetError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    _ensure_row_limit(len(rows))
    logger.debug("Parsed %d rows from %s, first row keys: %s", len(rows), filename, list(rows[0].keys()))

    preview: list[PreviewRowOut] = []
    for index, raw in enumerate(rows):
        record, issues = check_row(raw)
        preview.append(
            PreviewRowOut(
                row=index + 1,
                month=record.month,
                monthLabel=format_month_for_display(record.month),
                itemName=record.item_name,
                category=record.category,
                amount=float(record.amount),
                moneyIn=float(record.money_in),
                moneyOut=float(record.money_out),
                notes=record.notes,
                valid=not issues,
                issues=[_issue_out(i) for i in issues],
            )
        )

    invalid = sum(1 for p in preview if not p.valid)
    logger.info("Previewed %s for user id=%s: %d rows, %d invalid", filename, current_user.id, len(preview), invalid)
    return PreviewOut(filename=filename, count=len(preview), invalidCount=invalid, rows=preview)


@router.get("/all", response_model=ExpenseListOut)
def list_all_expenses(
    category: str | None = None,
    keyword: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExpenseListOut:
    rows = list_expenses(db, current_user.id, category=category, keyword=keyword, newest_first=True)
    items = [_expense_out(r) for r in rows]
    return ExpenseListOut(month=None, count=len(items), items=items)


@router.get("/months", response_model=list[str])
def months_with_expenses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[str]:
    return list_months(db, current_user.id)


@router.get("/compare", response_model=CompareOut)
def compare_expenses(
    month1: str | None = None,
    month2: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CompareOut:
    if not month1 or not month2:
        raise HTTPException(
            status_code=400,
            detail="Both month1 and month2 query parameters are required (format: YYYY-MM)",
        )
    ensure_month(month1)
    ensure_month(month2)

    agg1 = summarize(list_expenses(db, current_user.id, month=month1), month=month1)
    agg2 = summarize(list_expenses(db, current_user.id, month=month2), month=month2)
    result = compare(agg1, agg2)

    return CompareOut(
        comparison=ComparisonOut(
            moneyIn=MetricCompareOut.from_comparison(result.money_in),
            moneyOut=MetricCompareOut.from_comparison(result.money_out),
            remaining=MetricCompareOut.from_comparison(result.remaining),
        ),
        month1=MonthlySummaryOut.from_aggregate(agg1),
        month2=MonthlySummaryOut.from_aggregate(agg2),
    )


@router.get("/summary/{month}", response_model=ExpenseSummaryOut)
def expense_summary(
    month: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExpenseSummaryOut:
    scope = parse_month_scope(month)
    rows = list_expenses(db, current_user.id, month=scope)

    agg = summarize(rows, month=scope or ALL_TIME)
    return ExpenseSummaryOut(
        month=month,
        summary=MonthlySummaryOut.from_aggregate(agg),
        categoryBreakdown=[CategoryAmountOut.from_aggregate(c) for c in aggregate_by_category(rows)],
    )


@router.get("/{month}", response_model=ExpenseListOut)
def expenses_by_month(
    month: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExpenseListOut:
    ensure_month(month)
    rows = list_expenses(db, current_user.id, month=month, newest_first=True)
    items = [_expense_out(r) for r in rows]
    return ExpenseListOut(month=month, count=len(items), items=items)


@router.put("/{expense_id}", response_model=ExpenseOut)
def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExpenseOut:
    row = get_expense(db, current_user.id, expense_id)
    if not row:
        raise HTTPException(status_code=404, detail="Expense not found")

    changes: dict[str, Any] = payload.model_dump(exclude_unset=True)

    if changes.get("month") is not None:
        row.month = payload.month
    if changes.get("itemName") is not None:
        row.item_name = payload.itemName.strip()
    if changes.get("category") is not None:
        row.category = _clean_category(payload.category)
    if changes.get("amount") is not None:
        row.amount = payload.amount
    if changes.get("moneyIn") is not None:
        row.money_in = payload.moneyIn
    if changes.get("moneyOut") is not None:
        row.money_out = payload.moneyOut
    if "notes" in changes:
        row.notes = payload.notes or None

    db.add(row)
    db.commit()
    db.refresh(row)
    return _expense_out(row)


@router.delete("/{expense_id}")
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    row = get_expense(db, current_user.id, expense_id)
    if not row:
        raise HTTPException(status_code=404, detail="Expense not found")

    db.delete(row)
    db.commit()
    return {"ok": True}
