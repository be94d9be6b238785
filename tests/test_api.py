"""
Integration tests for the upload / records HTTP endpoints.
"""
import io

import pandas as pd
import pytest

from app.sales.pipeline import aggregate
from app.sales.schemas import Statistics


def _workbook(grid, engine="openpyxl") -> bytes:
    width = max(len(row) for row in grid)
    rows = [[cell if cell != "" else None for cell in row] + [None] * (width - len(row)) for row in grid]
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine=engine) as writer:
        pd.DataFrame(rows).to_excel(writer, header=False, index=False)
    return buffer.getvalue()


def _upload(client, content, filename="report.xlsx"):
    return client.post("/api/upload", files={"file": (filename, content)})


class TestUploadReport:
    def test_upload_xlsx(self, client, report_grid):
        resp = _upload(client, _workbook(report_grid))
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["record_count"] == 4
        assert body["summary"]["total_tickets"] == 3069
        assert body["summary"]["total_amount"] == 7556750.0
        assert body["summary"]["tours"] == 2
        assert body["headers"][:2] == ["Дата", "Время"]
        assert len(body["upload_id"]) == 32

    def test_upload_ods(self, client, report_grid):
        resp = _upload(client, _workbook(report_grid, engine="odf"), "report.ods")
        assert resp.status_code == 200
        assert resp.json()["record_count"] == 4

    def test_wrong_extension(self, client):
        resp = _upload(client, b"a,b,c", "report.csv")
        assert resp.status_code == 400

    def test_too_few_rows_commits_nothing(self, client):
        resp = _upload(client, _workbook([["Отчёт"], ["Тур"]]))
        assert resp.status_code == 400
        assert client.get("/api/uploads").json()["uploads"] == []

    def test_corrupt_workbook(self, client):
        resp = _upload(client, b"not a workbook")
        assert resp.status_code == 400

    def test_missing_file(self, client):
        resp = client.post("/api/upload")
        assert resp.status_code in (400, 422)


class TestUploadText:
    def test_sample(self, client, sample_order_text):
        resp = client.post("/api/upload-text", json={"text": sample_order_text})
        assert resp.status_code == 200
        body = resp.json()
        assert body["record_count"] == 1
        assert body["summary"]["total_amount"] == 5000.0

        records = client.get("/api/records", params={"upload_id": body["upload_id"]}).json()["records"]
        assert records[0]["date"] == "2026-01-04"
        assert records[0]["comment"] == "+79001234567 / anna@example.com"

    def test_blank_text(self, client):
        resp = client.post("/api/upload-text", json={"text": "   "})
        assert resp.status_code == 400

    def test_unrecognized_text(self, client):
        resp = client.post("/api/upload-text", json={"text": "просто текст\nбез заказов"})
        assert resp.status_code == 400


class TestRecords:
    def test_empty(self, client):
        resp = client.get("/api/records")
        assert resp.status_code == 200
        assert resp.json() == {"records": [], "statistics": None}

    @pytest.mark.parametrize(
        "params",
        [{}, {"tour_name": "теплоход"}, {"date_from": "2024-03-22"}, {"search": "анна"}],
    )
    def test_statistics_match_returned_records(self, client, report_grid, params):
        _upload(client, _workbook(report_grid))
        body = client.get("/api/records", params=params).json()
        assert body["records"]
        expected = aggregate(_Row(r) for r in body["records"])
        assert Statistics(**body["statistics"]) == expected

    def test_filter_without_match(self, client, report_grid):
        _upload(client, _workbook(report_grid))
        body = client.get("/api/records", params={"search": "никого"}).json()
        assert body == {"records": [], "statistics": None}


class TestUploads:
    def test_list_and_delete(self, client, report_grid, sample_order_text):
        report_id = _upload(client, _workbook(report_grid)).json()["upload_id"]
        text_id = client.post("/api/upload-text", json={"text": sample_order_text}).json()["upload_id"]

        uploads = {u["upload_id"]: u["record_count"] for u in client.get("/api/uploads").json()["uploads"]}
        assert uploads == {report_id: 4, text_id: 1}

        assert client.delete(f"/api/uploads/{report_id}").status_code == 200
        remaining = [u["upload_id"] for u in client.get("/api/uploads").json()["uploads"]]
        assert remaining == [text_id]

    def test_delete_unknown(self, client):
        assert client.delete("/api/uploads/nonexistent").status_code == 404

    def test_delete_all(self, client, sample_order_text):
        client.post("/api/upload-text", json={"text": sample_order_text})
        resp = client.delete("/api/uploads")
        assert resp.status_code == 200
        assert client.get("/api/records").json()["records"] == []


class _Row:
    """Attribute view over a JSON record."""

    def __init__(self, data: dict):
        self.__dict__.update(data)
