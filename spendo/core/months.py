from __future__ import annotations

import re
from datetime import date

MONTH_PATTERN = r"^\d{4}-\d{2}$"

_MONTH_RE = re.compile(r"\d{4}-\d{2}")
_YEAR_RE = re.compile(r"(\d{4})")

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Full names first, then abbreviations. The first token found in this order wins.
_MONTH_TOKENS = [name.lower() for name in MONTH_NAMES] + [name[:3].lower() for name in MONTH_NAMES]


def is_canonical_month(value: str | None) -> bool:
    if not value:
        return False
    return _MONTH_RE.fullmatch(value) is not None


def normalize_month(value: str | None) -> str | None:
    """Turn "June 2025", "Jun2025" or "2025-06" into the canonical YYYY-MM key.

    Returns None when no month name can be found. A missing year defaults to
    the current calendar year.
    """

    if value is None:
        return None

    text = str(value).strip()
    if not text:
        return None
    if _MONTH_RE.fullmatch(text):
        return text

    clean = text.lower()
    year_match = _YEAR_RE.search(clean)
    year = year_match.group(1) if year_match else str(date.today().year)

    for i, token in enumerate(_MONTH_TOKENS):
        if token in clean:
            return f"{year}-{i % 12 + 1:02d}"

    return None


def format_month_for_display(value: str | None) -> str:
    """Render YYYY-MM as "June 2025"; already readable input is returned as is."""

    if not value:
        return ""

    if any(ch.isalpha() for ch in value):
        return value

    if _MONTH_RE.fullmatch(value):
        year, month = value.split("-")
        index = int(month) - 1
        if 0 <= index < 12:
            return f"{MONTH_NAMES[index]} {year}"

    return value
