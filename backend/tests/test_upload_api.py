"""
Tests for the upload endpoints: import, history, record deletion.
"""

import uuid

import pytest
from sqlalchemy import func, select

from billtrack.core.config import settings
from billtrack.models.core import Property, Ward
from billtrack.models.ledger import UploadRecord
from tests.conftest import ADMIN_HEADERS, COMMISSIONER_HEADERS, STAFF_HEADERS
from tests.fixtures.register_factory import (
    LEGACY_XLS_BYTES,
    make_register_csv,
    make_register_excel,
    make_register_rows,
    register_row,
)

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _csv_file(data: bytes, filename: str = "register.csv", content_type: str = "text/csv"):
    return {"file": (filename, data, content_type)}


async def _count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar_one()


async def _upload(client, data: bytes, headers=ADMIN_HEADERS, **kwargs):
    return await client.post(
        "/api/v1/properties/upload", files=_csv_file(data, **kwargs), headers=headers
    )


# ─── Import ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_upload_clean_file(client, db_session):
    resp = await _upload(client, make_register_csv(make_register_rows(3)))
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Upload processed"
    assert body["summary"] == {
        "total": 3, "success": 3, "failed": 0, "duplicate": 0, "status": "Success",
    }
    assert "errors" not in body
    assert await _count(db_session, Property) == 3


@pytest.mark.asyncio
async def test_upload_partial_reports_errors(client):
    rows = [register_row("P1"), register_row("P2", owner_name=""), register_row("P3")]
    resp = await _upload(client, make_register_csv(rows))
    assert resp.status_code == 200
    body = resp.json()
    assert body["summary"]["status"] == "Partial"
    assert body["errors"] == ["Row 3: Missing required fields"]


@pytest.mark.asyncio
async def test_upload_xlsx(client):
    data = make_register_excel(make_register_rows(2))
    resp = await _upload(client, data, filename="register.xlsx", content_type=XLSX_TYPE)
    assert resp.status_code == 200
    assert resp.json()["summary"]["success"] == 2


@pytest.mark.asyncio
async def test_upload_sniffs_content_not_label(client):
    """An xlsx sent as octet-stream is still read as a workbook."""
    data = make_register_excel(make_register_rows(2))
    resp = await _upload(
        client, data, filename="register.bin", content_type="application/octet-stream"
    )
    assert resp.status_code == 200
    assert resp.json()["summary"]["success"] == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("data", [b"", b"S.No,Property ID,Ward No\n"])
async def test_upload_without_data_rows_rejected(client, db_session, data):
    resp = await _upload(client, data)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "File is empty or invalid"
    assert await _count(db_session, UploadRecord) == 0
    assert await _count(db_session, Ward) == 0
    assert await _count(db_session, Property) == 0


@pytest.mark.asyncio
async def test_upload_without_file(client):
    resp = await client.post("/api/v1/properties/upload", headers=ADMIN_HEADERS)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No file uploaded"


@pytest.mark.asyncio
async def test_upload_wrong_content_type(client, db_session):
    resp = await _upload(
        client, make_register_csv(make_register_rows(1)),
        filename="register.pdf", content_type="application/pdf",
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only CSV and Excel files are allowed"
    assert await _count(db_session, UploadRecord) == 0


@pytest.mark.asyncio
async def test_upload_too_large(client, db_session, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 64)
    resp = await _upload(client, make_register_csv(make_register_rows(5)))
    assert resp.status_code == 413
    assert await _count(db_session, UploadRecord) == 0


@pytest.mark.asyncio
async def test_upload_legacy_xls_rejected(client, db_session):
    resp = await _upload(
        client, LEGACY_XLS_BYTES,
        filename="register.xls", content_type="application/vnd.ms-excel",
    )
    assert resp.status_code == 400
    assert ".xls" in resp.json()["detail"]
    assert await _count(db_session, UploadRecord) == 0


@pytest.mark.asyncio
async def test_upload_quoted_fields_setting(client, db_session, monkeypatch):
    monkeypatch.setattr(settings, "CSV_QUOTED_FIELDS", True)
    rows = [register_row("P1", address='"5 Sarafa, Lane 2"')]
    resp = await _upload(client, make_register_csv(rows))
    assert resp.json()["summary"]["success"] == 1

    prop = (await db_session.execute(select(Property))).scalar_one()
    assert prop.address == "5 Sarafa, Lane 2"


@pytest.mark.asyncio
async def test_upload_malformed_quoted_csv_rejected(client, db_session, monkeypatch):
    monkeypatch.setattr(settings, "CSV_QUOTED_FIELDS", True)
    rows = make_register_rows(2) + [register_row("P9", address='"' + "x" * 200_000 + '"')]
    resp = await _upload(client, make_register_csv(rows))
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Could not parse CSV")
    assert await _count(db_session, UploadRecord) == 0
    assert await _count(db_session, Property) == 0


@pytest.mark.asyncio
async def test_upload_long_uploader_name_is_truncated(client, db_session):
    headers = {"X-User-Name": "M" * 400, "X-User-Role": "admin"}
    resp = await _upload(client, make_register_csv(make_register_rows(1)), headers=headers)
    assert resp.status_code == 200

    record = (await db_session.execute(select(UploadRecord))).scalar_one()
    assert record.uploaded_by == "M" * 255


@pytest.mark.asyncio
async def test_upload_records_uploader_name(client, db_session):
    headers = {"X-User-Name": "Meena Verma", "X-User-Role": "admin"}
    await _upload(client, make_register_csv(make_register_rows(1)), headers=headers)

    record = (await db_session.execute(select(UploadRecord))).scalar_one()
    assert record.uploaded_by == "Meena Verma"
    assert record.filename == "register.csv"


@pytest.mark.asyncio
@pytest.mark.parametrize("headers", [STAFF_HEADERS, COMMISSIONER_HEADERS])
async def test_upload_requires_admin(client, db_session, headers):
    resp = await _upload(client, make_register_csv(make_register_rows(1)), headers=headers)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied. Insufficient permissions."
    assert await _count(db_session, Property) == 0


@pytest.mark.asyncio
async def test_upload_requires_authentication(client):
    resp = await _upload(client, make_register_csv(make_register_rows(1)), headers={})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Authentication required"


# ─── History ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_history_lists_recent_first(client):
    await _upload(client, make_register_csv(make_register_rows(2)), filename="first.csv")
    await _upload(client, make_register_csv(make_register_rows(2)), filename="second.csv")

    resp = await client.get("/api/v1/properties/upload/history", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    uploads = resp.json()["uploads"]
    assert [u["filename"] for u in uploads] == ["second.csv", "first.csv"]
    assert uploads[0]["duplicate"] == 2
    assert uploads[0]["status"] == "Failed"
    assert uploads[1]["success"] == 2
    assert uploads[1]["errors"] == []


@pytest.mark.asyncio
async def test_history_limit(client):
    for i in range(3):
        await _upload(
            client, make_register_csv(make_register_rows(1, prefix=f"H{i}-")),
            filename=f"batch{i}.csv",
        )

    resp = await client.get(
        "/api/v1/properties/upload/history", params={"limit": 2}, headers=ADMIN_HEADERS
    )
    assert [u["filename"] for u in resp.json()["uploads"]] == ["batch2.csv", "batch1.csv"]


@pytest.mark.asyncio
async def test_history_capped_by_setting(client, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_HISTORY_LIMIT", 1)
    for i in range(2):
        await _upload(client, make_register_csv(make_register_rows(1, prefix=f"C{i}-")))

    resp = await client.get(
        "/api/v1/properties/upload/history", params={"limit": 10}, headers=ADMIN_HEADERS
    )
    assert len(resp.json()["uploads"]) == 1


@pytest.mark.asyncio
async def test_history_requires_admin(client):
    resp = await client.get("/api/v1/properties/upload/history", headers=STAFF_HEADERS)
    assert resp.status_code == 403


# ─── Delete ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_delete_record_keeps_properties(client, db_session):
    await _upload(client, make_register_csv(make_register_rows(2)))
    history = await client.get("/api/v1/properties/upload/history", headers=ADMIN_HEADERS)
    record_id = history.json()["uploads"][0]["id"]

    resp = await client.delete(
        f"/api/v1/properties/upload/{record_id}", headers=ADMIN_HEADERS
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Upload record deleted successfully"
    assert await _count(db_session, UploadRecord) == 0
    assert await _count(db_session, Property) == 2

    again = await client.delete(
        f"/api/v1/properties/upload/{record_id}", headers=ADMIN_HEADERS
    )
    assert again.status_code == 404
    assert again.json()["detail"] == "Upload record not found"


@pytest.mark.asyncio
async def test_delete_unknown_record(client):
    resp = await client.delete(
        f"/api/v1/properties/upload/{uuid.uuid4()}", headers=ADMIN_HEADERS
    )
    assert resp.status_code == 404
