"""Turn loosely keyed spreadsheet / JSON rows into transaction records.

Header spellings vary between sheets ("Amount (₹)", "amount ", "PRICE", ...),
so every field is resolved from an ordered list of candidate header names.
Candidate order decides ties.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from spendo.core.months import is_canonical_month, normalize_month

MONTH_KEYS = ["Month", "month", "MONTH", "Month ", "month ", "Date", "date", "DATE"]

ITEM_NAME_KEYS = [
    "Name",
    "name",
    "NAME",
    "Item Name",
    "item name",
    "ItemName",
    "itemName",
    "Item",
    "item",
    "ITEM",
    "Description",
    "description",
]

CATEGORY_KEYS = ["Category", "category", "CATEGORY", "Cat", "cat", "CAT"]

AMOUNT_KEYS = [
    "Amount (₹)",
    "Amount(₹)",
    "Amount (Rs)",
    "Amount(Rs)",
    "Amount (INR)",
    "Amount(INR)",
    "Amount",
    "amount",
    "AMOUNT",
    "Price",
    "price",
    "PRICE",
    "Cost",
    "cost",
    "COST",
    "Value",
    "value",
    "VALUE",
]

NOTES_KEYS = ["Notes", "notes", "Note", "note", "Description", "description"]

MONEY_IN_KEYS = ["moneyIn", "MoneyIn", "Money In", "money_in", "Income", "Credit"]
MONEY_OUT_KEYS = ["moneyOut", "MoneyOut", "Money Out", "money_out", "Expense", "Debit"]

# Last resort for the amount column: any header containing one of these.
AMOUNT_KEY_MARKERS = ["amount", "price", "cost", "value", "₹", "rs", "inr", "$", "€", "£"]

_CURRENCY_RE = re.compile(r"(₹|rs\.?|inr|\$|€|£)", re.IGNORECASE)
_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")
_NUMBER_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")

UNCATEGORIZED = "Uncategorized"

# Column limits of the expenses table.
ITEM_NAME_MAX_LENGTH = 200
CATEGORY_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 1000
MAX_AMOUNT = Decimal("9999999999.99")


@dataclass(frozen=True)
class TransactionRecord:
    month: str
    item_name: str = ""
    category: str = ""
    amount: Decimal = Decimal(0)
    money_in: Decimal = Decimal(0)
    money_out: Decimal = Decimal(0)
    notes: str = ""


@dataclass(frozen=True)
class RowIssue:
    field: str
    message: str
    value: Any = None


class RowValidationError(ValueError):
    """A single row failed the required-field checks."""

    def __init__(self, index: int, issues: list[RowIssue]):
        self.index = index
        self.issues = issues
        details = "; ".join(f"{i.field}: {i.message}" for i in issues)
        super().__init__(f"Row {index + 1}: {details}")


class BatchValidationError(ValueError):
    def __init__(self, errors: list[RowValidationError]):
        self.errors = errors
        super().__init__(f"{len(errors)} row(s) with missing or invalid data")


def _is_usable(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def find_value(row: Mapping[str, Any], candidates: Iterable[str], *, substring: bool = True) -> Any:
    """Resolve a row value by trying candidate header names.

    Passes, each walking the candidates in order: exact key, case-insensitive
    key, then (unless ``substring`` is False) case-insensitive containment in
    either direction. The first usable (non-empty) value wins; None when
    nothing matches.
    """

    candidates = list(candidates)

    for key in candidates:
        if key in row and _is_usable(row[key]):
            return row[key]

    normalized = [(str(rk).strip().lower(), rk) for rk in row.keys()]

    for key in candidates:
        wanted = key.strip().lower()
        for rk_lower, rk in normalized:
            if rk_lower == wanted and _is_usable(row[rk]):
                return row[rk]

    if not substring:
        return None

    for key in candidates:
        wanted = key.strip().lower()
        for rk_lower, rk in normalized:
            if not rk_lower:
                continue
            if (rk_lower in wanted or wanted in rk_lower) and _is_usable(row[rk]):
                return row[rk]

    return None


def parse_amount(value: Any) -> Decimal:
    """Coerce a cell into a non-negative Decimal; unparsable input becomes 0."""

    if value is None or isinstance(value, bool):
        return Decimal(0)

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return Decimal(0)
        return abs(Decimal(str(value)))

    if isinstance(value, (int, Decimal)):
        amount = Decimal(value)
        return abs(amount) if amount.is_finite() else Decimal(0)

    text = _CURRENCY_RE.sub("", str(value))
    text = _NON_NUMERIC_RE.sub("", text.replace(",", ""))
    match = _NUMBER_RE.match(text)
    if not match:
        return Decimal(0)
    try:
        return abs(Decimal(match.group(0)))
    except InvalidOperation:
        return Decimal(0)


def find_amount_value(row: Mapping[str, Any]) -> Any:
    value = find_value(row, AMOUNT_KEYS)
    if value is not None and parse_amount(value) != 0:
        return value

    for key in row.keys():
        key_lower = str(key).lower()
        if any(marker in key_lower for marker in AMOUNT_KEY_MARKERS) and _is_usable(row[key]):
            return row[key]

    return value


def parse_direction_amount(value: Any) -> Decimal:
    """Like parse_amount, but text must be a bare number, optionally with a currency mark.

    "HDFC 4321" or "Uber to T2" in a Credit / Expense column is a description,
    not an amount, and yields 0.
    """

    if isinstance(value, str):
        text = "".join(_CURRENCY_RE.sub("", value).replace(",", "").split())
        if not _NUMBER_RE.fullmatch(text):
            return Decimal(0)
    return parse_amount(value)


def _month_text(value: Any) -> str | None:
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m")
    if value is None:
        return None
    return str(value)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def extract_record(row: Mapping[str, Any]) -> TransactionRecord:
    month = normalize_month(_month_text(find_value(row, MONTH_KEYS)))
    amount = parse_amount(find_amount_value(row))

    money_in = parse_direction_amount(find_value(row, MONEY_IN_KEYS, substring=False))
    money_out = parse_direction_amount(find_value(row, MONEY_OUT_KEYS, substring=False))
    if money_in == 0 and money_out == 0:
        # Rows without a direction column are spending.
        money_out = amount
    elif amount == 0:
        amount = money_out or money_in

    return TransactionRecord(
        month=month or "",
        item_name=_text(find_value(row, ITEM_NAME_KEYS)),
        category=_text(find_value(row, CATEGORY_KEYS)),
        amount=amount,
        money_in=money_in,
        money_out=money_out,
        notes=_text(find_value(row, NOTES_KEYS)),
    )


def validate_record(record: TransactionRecord, raw_month: Any = None) -> list[RowIssue]:
    issues: list[RowIssue] = []
    if not is_canonical_month(record.month):
        shown = raw_month if raw_month is not None else record.month
        issues.append(RowIssue("month", f"Invalid month: {shown!s}. Expected format: YYYY-MM", shown))
    if not record.item_name:
        issues.append(RowIssue("itemName", "Name is required"))
    if record.amount <= 0:
        issues.append(RowIssue("amount", "Amount must be greater than 0", str(record.amount)))

    for name, text, limit in (
        ("itemName", record.item_name, ITEM_NAME_MAX_LENGTH),
        ("category", record.category, CATEGORY_MAX_LENGTH),
        ("notes", record.notes, NOTES_MAX_LENGTH),
    ):
        if len(text) > limit:
            issues.append(RowIssue(name, f"Must be at most {limit} characters (got {len(text)})"))

    for name, amount in (("amount", record.amount), ("moneyIn", record.money_in), ("moneyOut", record.money_out)):
        if amount > MAX_AMOUNT:
            issues.append(RowIssue(name, f"Must not exceed {MAX_AMOUNT}", str(amount)))
    return issues


def check_row(row: Mapping[str, Any]) -> tuple[TransactionRecord, list[RowIssue]]:
    record = extract_record(row)
    return record, validate_record(record, raw_month=find_value(row, MONTH_KEYS))


def extract_batch(rows: Iterable[Mapping[str, Any]]) -> list[TransactionRecord]:
    """Extract every row; raise BatchValidationError listing all bad rows."""

    records: list[TransactionRecord] = []
    errors: list[RowValidationError] = []
    for index, row in enumerate(rows):
        record, issues = check_row(row)
        if issues:
            errors.append(RowValidationError(index=index, issues=issues))
        records.append(record)

    if errors:
        raise BatchValidationError(errors)
    return records
