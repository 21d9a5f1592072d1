"""Tests for the /api/expenses endpoints."""

import io

import pytest
from openpyxl import Workbook

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _create(client, headers, **fields) -> dict:
    resp = client.post("/api/expenses", json=fields, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture()
def seeded(client, auth_headers) -> dict:
    """May: one expense. June: rent, tea and a salary."""
    _create(client, auth_headers, month="2025-05", itemName="Tea", category="Food", moneyOut="60")
    _create(client, auth_headers, month="2025-06", itemName="Rent", category="Housing", moneyOut="12000")
    _create(client, auth_headers, month="2025-06", itemName="Salary", category="Income", moneyIn="50000")
    _create(client, auth_headers, month="2025-06", itemName="Tea", category="Food", moneyOut="40", notes="masala chai")
    return auth_headers


class TestCreateAndList:
    """Tests for creating and listing expenses."""

    def test_create_defaults_amount_to_money_out(self, client, auth_headers) -> None:
        body = _create(client, auth_headers, month="2025-06", itemName=" Tea ", category="Food", moneyOut="40")

        assert body["amount"] == 40.0
        assert body["moneyOut"] == 40.0
        assert body["moneyIn"] == 0.0
        assert body["remaining"] == -40.0
        assert body["itemName"] == "Tea"
        assert body["monthLabel"] == "June 2025"

    def test_create_income_uses_money_in(self, client, auth_headers) -> None:
        body = _create(client, auth_headers, month="2025-06", itemName="Salary", category="Income", moneyIn="500")
        assert body["amount"] == 500.0

    def test_create_rejects_non_canonical_month(self, client, auth_headers) -> None:
        resp = client.post(
            "/api/expenses",
            json={"month": "June 2025", "itemName": "Tea", "category": "Food", "moneyOut": "1"},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    def test_create_rejects_blank_category(self, client, auth_headers) -> None:
        resp = client.post(
            "/api/expenses",
            json={"month": "2025-06", "itemName": "Tea", "category": "  ", "moneyOut": "1"},
            headers=auth_headers,
        )
        assert resp.status_code == 400

    def test_requires_authentication(self, client) -> None:
        assert client.get("/api/expenses/all").status_code == 401

    def test_list_by_month(self, client, seeded) -> None:
        resp = client.get("/api/expenses/2025-06", headers=seeded)

        assert resp.status_code == 200
        body = resp.json()
        assert body["month"] == "2025-06"
        assert body["count"] == 3
        # Newest first.
        assert [i["itemName"] for i in body["items"]] == ["Tea", "Salary", "Rent"]

    def test_list_by_invalid_month(self, client, auth_headers) -> None:
        resp = client.get("/api/expenses/2025-6", headers=auth_headers)

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid month format (YYYY-MM)"

    def test_list_all_with_filters(self, client, seeded) -> None:
        """Should narrow /all by category and keyword."""
        assert client.get("/api/expenses/all", headers=seeded).json()["count"] == 4

        food = client.get("/api/expenses/all", params={"category": "Food"}, headers=seeded).json()
        assert food["count"] == 2
        assert food["month"] is None

        chai = client.get("/api/expenses/all", params={"keyword": "CHAI"}, headers=seeded).json()
        assert [i["month"] for i in chai["items"]] == ["2025-06"]

    def test_months(self, client, seeded) -> None:
        assert client.get("/api/expenses/months", headers=seeded).json() == ["2025-05", "2025-06"]

    def test_users_only_see_their_own_rows(self, client, seeded, login) -> None:
        other = login("other@example.com")
        assert client.get("/api/expenses/all", headers=other).json()["count"] == 0


class TestUpdateAndDelete:
    """Tests for PUT and DELETE /api/expenses/{id}."""

    def test_update_fields(self, client, auth_headers) -> None:
        created = _create(client, auth_headers, month="2025-06", itemName="Tea", category="Food", moneyOut="40")

        resp = client.put(
            f"/api/expenses/{created['id']}",
            json={"month": "2025-07", "moneyOut": "55", "notes": "with snacks"},
            headers=auth_headers,
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["month"] == "2025-07"
        assert body["moneyOut"] == 55.0
        assert body["notes"] == "with snacks"
        assert body["itemName"] == "Tea"

    def test_empty_notes_clear_the_note(self, client, auth_headers) -> None:
        created = _create(client, auth_headers, month="2025-06", itemName="Tea", category="Food", moneyOut="1", notes="x")

        resp = client.put(f"/api/expenses/{created['id']}", json={"notes": ""}, headers=auth_headers)
        assert resp.json()["notes"] is None

    def test_delete(self, client, auth_headers) -> None:
        created = _create(client, auth_headers, month="2025-06", itemName="Tea", category="Food", moneyOut="1")

        assert client.delete(f"/api/expenses/{created['id']}", headers=auth_headers).json() == {"ok": True}
        assert client.get("/api/expenses/all", headers=auth_headers).json()["count"] == 0

    def test_other_users_expense_is_not_found(self, client, auth_headers, login) -> None:
        """Should hide another user's rows behind a 404."""
        created = _create(client, auth_headers, month="2025-06", itemName="Tea", category="Food", moneyOut="1")
        other = login("other@example.com")

        assert client.put(f"/api/expenses/{created['id']}", json={"moneyOut": "2"}, headers=other).status_code == 404
        assert client.delete(f"/api/expenses/{created['id']}", headers=other).status_code == 404


class TestSummaryAndCompare:
    """Tests for /summary/{month} and /compare."""

    def test_month_summary(self, client, seeded) -> None:
        body = client.get("/api/expenses/summary/2025-06", headers=seeded).json()

        assert body["summary"]["totalMoneyIn"] == 50000.0
        assert body["summary"]["totalMoneyOut"] == 12040.0
        assert body["summary"]["remaining"] == 37960.0
        assert body["summary"]["totalExpenses"] == 3
        assert [c["category"] for c in body["categoryBreakdown"]] == ["Housing", "Food", "Income"]
        assert body["categoryBreakdown"][2]["percentage"] == 0.0

    def test_all_time_summary(self, client, seeded) -> None:
        body = client.get("/api/expenses/summary/all-time", headers=seeded).json()

        assert body["month"] == "all-time"
        assert body["summary"]["totalMoneyOut"] == 12100.0
        assert body["summary"]["totalExpenses"] == 4
        assert body["categoryBreakdown"][0]["category"] == "Housing"

    def test_empty_month_summary_is_zero(self, client, auth_headers) -> None:
        body = client.get("/api/expenses/summary/2024-01", headers=auth_headers).json()

        assert body["summary"]["totalMoneyOut"] == 0.0
        assert body["categoryBreakdown"] == []

    def test_compare(self, client, seeded) -> None:
        resp = client.get("/api/expenses/compare", params={"month1": "2025-05", "month2": "2025-06"}, headers=seeded)

        assert resp.status_code == 200
        body = resp.json()
        money_out = body["comparison"]["moneyOut"]
        assert money_out["month1"] == 60.0
        assert money_out["month2"] == 12040.0
        assert money_out["difference"] == 11980.0
        assert money_out["hasBaseline"] is True
        assert money_out["percentageChange"] == pytest.approx(19966.6667, rel=1e-6)

        money_in = body["comparison"]["moneyIn"]
        assert money_in["percentageChange"] == 0.0
        assert money_in["hasBaseline"] is False
        assert body["month2"]["monthLabel"] == "June 2025"

    def test_compare_requires_both_months(self, client, auth_headers) -> None:
        resp = client.get("/api/expenses/compare", params={"month1": "2025-05"}, headers=auth_headers)
        assert resp.status_code == 400

    def test_compare_rejects_bad_month(self, client, auth_headers) -> None:
        resp = client.get("/api/expenses/compare", params={"month1": "May", "month2": "2025-06"}, headers=auth_headers)
        assert resp.status_code == 400

    def test_compare_rejects_trailing_newline(self, client, auth_headers) -> None:
        """Should treat '2025-06\\n' as malformed rather than an empty month."""
        resp = client.get(
            "/api/expenses/compare", params={"month1": "2025-06\n", "month2": "2025-07"}, headers=auth_headers
        )
        assert resp.status_code == 400
        assert client.get("/api/expenses/summary/2025-06%0A", headers=auth_headers).status_code == 400


class TestUpload:
    """Tests for bulk upload and spreadsheet preview."""

    def test_upload_saves_every_row(self, client, auth_headers) -> None:
        rows = [
            {"Month": "June 2025", "Name": "Rent", "Category": "Housing", "Amount (₹)": "12,000"},
            {"month": "2025-06", "itemName": "Salary", "category": "Income", "moneyIn": 50000},
        ]
        resp = client.post("/api/expenses/upload", json={"expenses": rows}, headers=auth_headers)

        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["count"] == 2
        assert body["items"][0]["moneyOut"] == 12000.0
        assert body["items"][1]["moneyIn"] == 50000.0
        assert body["items"][1]["amount"] == 50000.0
        assert client.get("/api/expenses/2025-06", headers=auth_headers).json()["count"] == 2

    def test_bad_row_rejects_whole_batch(self, client, auth_headers) -> None:
        """Should save nothing and report every failing row."""
        rows = [
            {"Month": "June 2025", "Name": "Tea", "Amount": 20},
            {"Month": "nope", "Name": "Milk", "Amount": 35},
        ]
        resp = client.post("/api/expenses/upload", json={"expenses": rows}, headers=auth_headers)

        assert resp.status_code == 422
        detail = resp.json()["detail"]
        assert [e["row"] for e in detail["errors"]] == [2]
        assert detail["errors"][0]["issues"][0]["field"] == "month"
        assert detail["errors"][0]["issues"][0]["value"] == "nope"
        assert client.get("/api/expenses/all", headers=auth_headers).json()["count"] == 0

    def test_rows_over_column_limits_are_rejected(self, client, auth_headers) -> None:
        """Should report oversized rows per row instead of failing at commit."""
        rows = [
            {"Month": "June 2025", "Name": "x" * 300, "Amount": 20},
            {"Month": "June 2025", "Name": "Flat", "Amount": 10**12},
            {"Month": "June 2025", "Name": "Tea", "Amount": 20},
        ]
        resp = client.post("/api/expenses/upload", json={"expenses": rows}, headers=auth_headers)

        assert resp.status_code == 422
        errors = resp.json()["detail"]["errors"]
        assert [(e["row"], e["issues"][0]["field"]) for e in errors] == [(1, "itemName"), (2, "amount")]
        assert client.get("/api/expenses/all", headers=auth_headers).json()["count"] == 0

    def test_credit_card_column_stays_spending(self, client, auth_headers) -> None:
        rows = [{"Month": "June 2025", "Name": "Rent", "Amount": 15000, "Credit Card": "HDFC 4321"}]
        resp = client.post("/api/expenses/upload", json={"expenses": rows}, headers=auth_headers)

        assert resp.status_code == 201
        item = resp.json()["items"][0]
        assert (item["moneyIn"], item["moneyOut"]) == (0.0, 15000.0)

    def test_manual_amount_over_limit(self, client, auth_headers) -> None:
        resp = client.post(
            "/api/expenses",
            json={"month": "2025-06", "itemName": "Flat", "category": "Housing", "moneyOut": "1000000000000"},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    def test_empty_upload(self, client, auth_headers) -> None:
        resp = client.post("/api/expenses/upload", json={"expenses": []}, headers=auth_headers)
        assert resp.status_code == 422

    def test_preview_xlsx(self, client, auth_headers) -> None:
        wb = Workbook()
        ws = wb.active
        ws.append(["Month", "Item", "Category", "Amount"])
        ws.append(["June 2025", "Tea", "Food", 40])
        ws.append(["bad", "Milk", "Food", 0])
        buf = io.BytesIO()
        wb.save(buf)

        resp = client.post(
            "/api/expenses/upload/preview",
            files={"file": ("june.xlsx", buf.getvalue(), XLSX_TYPE)},
            headers=auth_headers,
        )

        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["filename"] == "june.xlsx"
        assert body["count"] == 2
        assert body["invalidCount"] == 1
        first, second = body["rows"]
        assert first["valid"] is True
        assert first["month"] == "2025-06"
        assert first["monthLabel"] == "June 2025"
        assert [i["field"] for i in second["issues"]] == ["month", "amount"]
        # Preview never writes.
        assert client.get("/api/expenses/all", headers=auth_headers).json()["count"] == 0

    def test_preview_unsupported_file(self, client, auth_headers) -> None:
        resp = client.post(
            "/api/expenses/upload/preview",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
