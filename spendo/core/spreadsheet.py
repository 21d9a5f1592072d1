"""Read uploaded .xlsx / .csv files into header-keyed rows."""

from __future__ import annotations

import csv
import io
from typing import Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException


class SpreadsheetError(ValueError):
    pass


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _headers(cells: tuple[Any, ...]) -> list[str]:
    headers: list[str] = []
    for i, cell in enumerate(cells):
        name = "" if cell is None else str(cell).strip()
        headers.append(name or f"Column {i + 1}")
    return headers


def read_xlsx_rows(content: bytes) -> list[dict[str, Any]]:
    try:
        wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException, KeyError) as exc:
        raise SpreadsheetError("Not a valid .xlsx file") from exc

    try:
        if not wb.worksheets:
            raise SpreadsheetError("No data found in the selected file")
        ws = wb.worksheets[0]

        headers: list[str] | None = None
        rows: list[dict[str, Any]] = []
        for values in ws.iter_rows(values_only=True):
            if all(_is_blank(v) for v in values):
                continue
            if headers is None:
                headers = _headers(values)
                continue
            rows.append({h: v for h, v in zip(headers, values)})
    finally:
        wb.close()

    return rows


def read_csv_rows(content: bytes) -> list[dict[str, Any]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SpreadsheetError("CSV file must be UTF-8 encoded") from exc

    reader = csv.DictReader(io.StringIO(text, newline=""))
    rows: list[dict[str, Any]] = []
    for row in reader:
        # Short rows pad with None; long rows park extras under the None key.
        cleaned = {k.strip(): v for k, v in row.items() if k is not None}
        if all(_is_blank(v) for v in cleaned.values()):
            continue
        rows.append(cleaned)
    return rows


def read_rows(filename: str, content: bytes) -> list[dict[str, Any]]:
    name = (filename or "").lower()
    if name.endswith(".xlsx") or name.endswith(".xlsm"):
        rows = read_xlsx_rows(content)
    elif name.endswith(".csv"):
        rows = read_csv_rows(content)
    else:
        raise SpreadsheetError("Unsupported file type (expected .xlsx or .csv)")

    if not rows:
        raise SpreadsheetError("No data found in the selected file")
    return rows
