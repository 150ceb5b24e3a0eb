"""
Bulk upload API routes.

Endpoints:
  POST   /api/v1/properties/upload           — Import a property register (CSV/XLSX)
  GET    /api/v1/properties/upload/history   — Most recent upload records
  DELETE /api/v1/properties/upload/:id       — Delete an upload record

All endpoints are admin-only. Deleting a record leaves the imported
properties in place.
"""

import uuid

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from billtrack.api.deps import CurrentUser, require_admin
from billtrack.core.config import settings
from billtrack.core.database import get_db
from billtrack.schemas.uploads import (
    ImportResult,
    MessageResponse,
    UploadHistory,
    UploadRecordResponse,
)
from billtrack.services.errors import ImportFileError, UploadRecordNotFound
from billtrack.services.import_service import run_import
from billtrack.services.ledger import UploadLedger

router = APIRouter()

ACCEPTED_CONTENT_TYPES = {
    "text/csv",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    # Some clients do not label CSV at all
    "text/plain",
    "application/octet-stream",
}


def _base_content_type(content_type: str | None) -> str:
    if not content_type:
        return "application/octet-stream"
    return content_type.split(";", 1)[0].strip().lower()


@router.post(
    "/upload",
    response_model=ImportResult,
    response_model_exclude_none=True,
)
async def upload_properties(
    file: UploadFile | None = File(None),
    user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Import a property register.

    Rows are processed in file order; each is classified as success,
    duplicate or failed, and one upload record is written for the run.
    A file without a header and at least one data row is rejected
    before anything is written.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    if _base_content_type(file.content_type) not in ACCEPTED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400, detail="Only CSV and Excel files are allowed"
        )

    file_bytes = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(file_bytes) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MiB limit",
        )

    try:
        return await run_import(
            db,
            file_bytes,
            filename=file.filename,
            uploaded_by=user.name,
            quoted=settings.CSV_QUOTED_FIELDS,
        )
    except ImportFileError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/upload/history", response_model=UploadHistory)
async def get_upload_history(
    limit: int | None = Query(None, ge=1),
    _user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Most recent upload records first, capped at UPLOAD_HISTORY_LIMIT."""
    cap = settings.UPLOAD_HISTORY_LIMIT
    records = await UploadLedger(db).list(limit=min(limit or cap, cap))
    return UploadHistory(
        uploads=[UploadRecordResponse.model_validate(r) for r in records]
    )


@router.delete("/upload/{upload_id}", response_model=MessageResponse)
async def delete_upload_record(
    upload_id: uuid.UUID,
    _user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        await UploadLedger(db).delete(upload_id)
    except UploadRecordNotFound:
        raise HTTPException(status_code=404, detail="Upload record not found")
    return MessageResponse(message="Upload record deleted successfully")
