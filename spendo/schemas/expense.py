from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from spendo.core.extraction import CATEGORY_MAX_LENGTH, ITEM_NAME_MAX_LENGTH, MAX_AMOUNT, NOTES_MAX_LENGTH
from spendo.core.months import MONTH_PATTERN


class ExpenseCreate(BaseModel):
    month: str = Field(pattern=MONTH_PATTERN)
    itemName: str = Field(default="", max_length=ITEM_NAME_MAX_LENGTH)
    category: str = Field(min_length=1, max_length=CATEGORY_MAX_LENGTH)
    # Defaults to moneyOut (or moneyIn) when omitted.
    amount: Decimal | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    moneyIn: Decimal = Field(default=Decimal(0), ge=0, le=MAX_AMOUNT)
    moneyOut: Decimal = Field(default=Decimal(0), ge=0, le=MAX_AMOUNT)
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)


class ExpenseUpdate(BaseModel):
    month: str | None = Field(default=None, pattern=MONTH_PATTERN)
    itemName: str | None = Field(default=None, max_length=ITEM_NAME_MAX_LENGTH)
    category: str | None = Field(default=None, min_length=1, max_length=CATEGORY_MAX_LENGTH)
    amount: Decimal | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    moneyIn: Decimal | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    moneyOut: Decimal | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    # When provided as an empty string, backend will treat it as clearing the note.
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)


class ExpenseOut(BaseModel):
    id: int
    month: str = Field(description="YYYY-MM")
    monthLabel: str
    itemName: str
    category: str
    amount: float
    moneyIn: float
    moneyOut: float
    remaining: float
    notes: str | None
    createdAt: datetime
    updatedAt: datetime


class ExpenseListOut(BaseModel):
    month: str | None = None
    count: int
    items: list[ExpenseOut]


class UploadRequest(BaseModel):
    # Loosely keyed rows, e.g. straight from a parsed spreadsheet.
    expenses: list[dict[str, Any]] = Field(min_length=1)


class RowIssueOut(BaseModel):
    field: str
    message: str
    value: str | None = None


class RowErrorOut(BaseModel):
    row: int = Field(description="1-based row number")
    issues: list[RowIssueOut]


class UploadOut(BaseModel):
    count: int
    items: list[ExpenseOut]


class PreviewRowOut(BaseModel):
    row: int
    month: str
    monthLabel: str
    itemName: str
    category: str
    amount: float
    moneyIn: float
    moneyOut: float
    notes: str
    valid: bool
    issues: list[RowIssueOut] = Field(default_factory=list)


class PreviewOut(BaseModel):
    filename: str
    count: int
    invalidCount: int
    rows: list[PreviewRowOut]
