"""Pydantic schemas for bulk property upload and upload history."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from billtrack.models.enums import UploadStatus


class ImportSummary(BaseModel):
    """Counts from one import run. total == success + failed + duplicate."""
    total: int = 0
    success: int = 0
    failed: int = 0
    duplicate: int = 0
    status: UploadStatus


class ImportResult(BaseModel):
    """Response from the bulk upload endpoint."""
    message: str = "Upload processed"
    summary: ImportSummary
    errors: list[str] | None = Field(
        None,
        description="One message per failed or duplicate row, in file order. "
                    "Omitted when every row succeeded.",
    )


class UploadRecordResponse(BaseModel):
    """A ledger entry as shown in upload history."""
    id: uuid.UUID
    filename: str
    uploaded_by: str
    total: int
    success: int
    failed: int
    duplicate: int
    status: UploadStatus
    errors: list[str] = Field(default_factory=list)
    timestamp: datetime

    model_config = {"from_attributes": True}


class UploadHistory(BaseModel):
    uploads: list[UploadRecordResponse]


class MessageResponse(BaseModel):
    message: str
